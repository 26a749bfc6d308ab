"""
Regression Predictor - linear trend over a player's recent scoring.

Model:
    x = game index (1..N, oldest → newest)
    y = points scored in that game
    Ordinary least squares line; the prediction is the line at x = N + 1.

Confidence (0-100) blends three signals:
- Sample size: up to 50 points, linear in min(N, 10) / 10
- Consistency: up to 30 points, (1 - min(CV, 1)) where CV = std / mean
- Model fit: up to 20 points, R² × 20

Error margin is one population standard deviation of the series.
"""
import logging
from typing import Tuple

import numpy as np

from hoopforecast.core.exceptions import InsufficientHistory
from hoopforecast.models.forecast import GameSeries, Prediction, RegressionFit

logger = logging.getLogger(__name__)

MIN_GAMES_FOR_PREDICTION = 3


def fit_line(x: np.ndarray, y: np.ndarray) -> Tuple[float, float]:
    """Least-squares slope and intercept of y against x."""
    x_mean = x.mean()
    y_mean = y.mean()

    sxx = float(((x - x_mean) ** 2).sum())
    sxy = float(((x - x_mean) * (y - y_mean)).sum())

    slope = sxy / sxx if sxx else 0.0
    intercept = float(y_mean) - slope * float(x_mean)
    return slope, intercept


def r_squared(x: np.ndarray, y: np.ndarray, slope: float, intercept: float) -> float:
    """
    Coefficient of determination, clamped to [0, 1].

    A constant series has no variance to explain: R² is 1 when the line
    passes through every point and 0 otherwise.
    """
    residuals = y - (intercept + slope * x)
    ss_res = float((residuals ** 2).sum())
    ss_tot = float(((y - y.mean()) ** 2).sum())

    if ss_tot == 0:
        return 1.0 if np.isclose(ss_res, 0.0) else 0.0

    return min(1.0, max(0.0, 1.0 - ss_res / ss_tot))


class RegressionPredictor:
    """Predict next-game points from a GameSeries."""

    TARGET_SAMPLE_SIZE = 10
    SAMPLE_WEIGHT = 50.0
    CONSISTENCY_WEIGHT = 30.0
    FIT_WEIGHT = 20.0

    def __init__(self, min_games: int = MIN_GAMES_FOR_PREDICTION):
        self.min_games = min_games

    def predict(self, series: GameSeries) -> Prediction:
        """
        Fit the trend and predict the next game.

        The series arrives most-recent-first; it is reversed so that game
        index increases with time before fitting.

        Raises:
            InsufficientHistory: fewer than ``min_games`` records. Callers
                are expected to check this before calling.
        """
        games = series.chronological()
        n = len(games)
        if n < self.min_games:
            raise InsufficientHistory(n, self.min_games)

        y = np.array([game.points for game in games], dtype=float)
        x = np.arange(1, n + 1, dtype=float)

        slope, intercept = fit_line(x, y)
        predicted = intercept + slope * (n + 1)

        mean = float(y.mean())
        std_dev = float(y.std())  # population (ddof=0)
        fit_quality = r_squared(x, y, slope, intercept)

        confidence = self.confidence(n, mean, std_dev, fit_quality)

        logger.debug(
            f"Fitted {n} games: slope={slope:.3f}, intercept={intercept:.3f}, "
            f"r2={fit_quality:.3f}, predicted={predicted:.2f}"
        )

        return Prediction(
            predicted_points=round(predicted, 1),
            confidence=round(confidence, 1),
            error_margin=round(std_dev, 1),
            games_used=n,
            fit=RegressionFit(slope=slope, intercept=intercept, r_squared=fit_quality),
        )

    def confidence(self, n: int, mean: float, std_dev: float, fit_quality: float) -> float:
        """Weighted blend of sample size, consistency and fit, clamped to [0, 100]."""
        sample_term = min(n, self.TARGET_SAMPLE_SIZE) / self.TARGET_SAMPLE_SIZE * self.SAMPLE_WEIGHT

        if mean > 0:
            consistency_term = (1 - min(std_dev / mean, 1.0)) * self.CONSISTENCY_WEIGHT
        else:
            consistency_term = 0.0

        fit_term = fit_quality * self.FIT_WEIGHT

        return min(100.0, max(0.0, sample_term + consistency_term + fit_term))
