from .__about__ import *

import warnings

warnings.filterwarnings('ignore', category=FutureWarning, module='statsmodels')
warnings.filterwarnings('ignore', category=UserWarning, module='matplotlib')

del warnings
