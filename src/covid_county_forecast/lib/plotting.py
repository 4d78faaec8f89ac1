from pathlib import Path
from typing import Dict, Tuple, Union

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
import numpy as np
import pandas as pd
import seaborn as sns
from sklearn.tree import DecisionTreeRegressor, plot_tree

from covid_county_forecast.lib import (
    cli_tools,
)

logger = cli_tools.task_performance_logger

# (observed, predicted) for each named model
Predictions = Dict[str, Tuple[pd.Series, pd.Series]]


class Plotter:
    point_alpha = 0.3
    point_size = 8
    ax_label_fontsize = 14
    tick_label_fontsize = 11
    title_fontsize = 18
    fig_size = (16, 8)

    def __init__(self):
        sns.set_style('whitegrid')

    def observed_vs_predicted(self, predictions: Predictions, path: Union[str, Path]) -> None:
        fig, axes = plt.subplots(1, len(predictions), figsize=self.fig_size, squeeze=False)
        for ax, (name, (observed, predicted)) in zip(axes[0], predictions.items()):
            ax.scatter(observed, predicted, s=self.point_size, alpha=self.point_alpha)
            self._add_identity_line(ax, observed, predicted)
            self._format_ax(ax, title=name,
                            xlabel='Observed cases in 14 days',
                            ylabel='Predicted cases in 14 days')
        fig.suptitle('Held-out predictions', fontsize=self.title_fontsize)
        self._save(fig, path)

    def importance(self, importance: pd.Series, title: str, path: Union[str, Path]) -> None:
        fig, ax = plt.subplots(figsize=self.fig_size)
        ordered = importance.sort_values()
        ax.barh(ordered.index, ordered.values)
        self._format_ax(ax, title=title, xlabel=importance.name or '', ylabel='')
        self._save(fig, path)

    def tree(self, model: DecisionTreeRegressor, feature_names, path: Union[str, Path],
             max_depth: int = 3) -> None:
        fig, ax = plt.subplots(figsize=(24, 12))
        plot_tree(model, feature_names=list(feature_names), max_depth=max_depth,
                  filled=True, rounded=True, impurity=False, ax=ax, fontsize=9)
        ax.set_title('Regression tree (top levels)', fontsize=self.title_fontsize)
        self._save(fig, path)

    def _format_ax(self, ax: Axes, title: str, xlabel: str, ylabel: str) -> None:
        ax.set_title(title, fontsize=self.ax_label_fontsize)
        ax.set_xlabel(xlabel, fontsize=self.ax_label_fontsize)
        ax.set_ylabel(ylabel, fontsize=self.ax_label_fontsize)
        ax.tick_params(labelsize=self.tick_label_fontsize)

    @staticmethod
    def _add_identity_line(ax: Axes, observed: pd.Series, predicted: pd.Series) -> None:
        values = np.concatenate([np.asarray(observed, dtype=float), np.asarray(predicted, dtype=float)])
        lo, hi = np.nanmin(values), np.nanmax(values)
        ax.plot([lo, hi], [lo, hi], color='black', linestyle='dashed', linewidth=1)

    @staticmethod
    def _save(fig, path: Union[str, Path]) -> None:
        fig.savefig(path, bbox_inches='tight')
        plt.close(fig)
        logger.debug(f'Wrote {path}.')
