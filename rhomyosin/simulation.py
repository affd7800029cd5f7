"""
simulation.py
Adaptive Bogacki-Shampine integration of the spine signaling network.

The stepper is compiled with numba and works in place on the state and
derivative buffers; the driver loop stays in Python so it can hand samples
to any writer and report progress.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional, Union

import numpy as np
from numba import njit
from scipy.integrate import solve_ivp
from tqdm import tqdm

from rhomyosin.config import (
    DT0, DT_SAVE, GROW_MAX, MIN_STEP, SAFETY, SHRINK_MAX, T_END, TOLERANCE,
)
from rhomyosin.core_mechanisms import rhs
from rhomyosin.logger import get_logger

logger = get_logger()

ACCEPTED = 0
REJECTED = 1
UNDERFLOW = 2


class StepStatus(IntEnum):
    ACCEPTED = ACCEPTED
    REJECTED = REJECTED
    UNDERFLOW = UNDERFLOW


@njit(cache=True, error_model="numpy")
def bogacki_shampine_step(t, x, dxdt1, h, tolerance):
    """
    Attempt one Bogacki-Shampine 3(2) step of size h.

    dxdt1 must hold f(t, x). On acceptance x, dxdt1 are overwritten with the
    third-order solution and its derivative (first-same-as-last); on
    rejection they are left untouched.

    Returns:
        (status, t, h): step status, the (possibly advanced) time and the
        step size to try next.
    """
    xtmp = x + 0.5 * h * dxdt1
    dxdt2 = rhs(t + 0.5 * h, xtmp)

    xtmp = x + 0.75 * h * dxdt2
    dxdt3 = rhs(t + 0.75 * h, xtmp)

    xtmp = x + (1.0 / 9.0) * h * (2.0 * dxdt1 + 3.0 * dxdt2 + 4.0 * dxdt3)
    dxdt4 = rhs(t + h, xtmp)

    errmax = 0.0
    for i in range(x.size):
        xtmp[i] = x[i] + h / 24.0 * (7.0 * dxdt1[i] + 6.0 * dxdt2[i] + 8.0 * dxdt3[i] + 3.0 * dxdt4[i])
        erri = abs(h * ((5.0 / 72.0) * dxdt1[i] - (1.0 / 12.0) * dxdt2[i]
                        - (1.0 / 9.0) * dxdt3[i] + (1.0 / 8.0) * dxdt4[i])) / tolerance
        if erri > errmax:
            errmax = erri

    if errmax > 0.0:
        fct = SAFETY / errmax ** (1.0 / 3.0)
    else:
        fct = GROW_MAX

    if errmax > 1.0:
        if fct < SHRINK_MAX:
            h *= SHRINK_MAX
        else:
            h *= fct
        if h < MIN_STEP:
            return UNDERFLOW, t, h
        return REJECTED, t, h

    dxdt1[:] = dxdt4
    x[:] = xtmp
    t += h
    if fct > GROW_MAX:
        h *= GROW_MAX
    else:
        h *= fct
    return ACCEPTED, t, h


@dataclass
class StepStatistics:
    t_end: float
    n_steps: int = 0
    n_accepted: int = 0
    h_min: float = DT0
    h_max: float = MIN_STEP

    @property
    def n_rejected(self):
        return self.n_steps - self.n_accepted

    @property
    def rejected_fraction(self):
        if self.n_steps == 0:
            return 0.0
        return 1.0 - self.n_accepted * 1.0 / self.n_steps

    @property
    def mean_step(self):
        if self.n_steps == 0:
            return float("nan")
        return self.t_end / self.n_steps

    def as_dict(self):
        return {
            "n_steps": self.n_steps,
            "n_accepted": self.n_accepted,
            "rejected_fraction": self.rejected_fraction,
            "mean_step": self.mean_step,
            "h_min": self.h_min,
            "h_max": self.h_max,
        }


@dataclass
class IntegrationSuccess:
    t: float
    state: np.ndarray
    statistics: StepStatistics
    n_samples: int


@dataclass
class StepSizeUnderflow:
    t: float
    h: float
    statistics: StepStatistics

    def message(self):
        return f"step size underflow in bogacki_shampine_step() at t={self.t!r} (h={self.h!r})"


IntegrationResult = Union[IntegrationSuccess, StepSizeUnderflow]


def integrate(x0, t_end=T_END, h0=DT0, dt_save=DT_SAVE, tolerance=TOLERANCE,
              on_sample: Optional[Callable[[float, np.ndarray], None]] = None,
              progress=False) -> IntegrationResult:
    """
    Drive the adaptive stepper from t=0 until t >= t_end.

    A sample is emitted on the first accepted step that moves t past the
    next scheduled sample time, after which the schedule advances by
    dt_save. Sample times therefore follow the adaptive steps and are not
    evenly spaced.

    Args:
        x0 (array-like): Initial state; copied, never modified.
        t_end (float): End of the simulated interval.
        h0 (float): Initial step size.
        dt_save (float): Sampling interval.
        tolerance (float): Absolute local error tolerance per step.
        on_sample (callable): Called as on_sample(t, x) for every sample.
            x is the live state buffer; copy it to keep it.
        progress (bool): Show a tqdm bar over simulated time.

    Returns:
        IntegrationSuccess or StepSizeUnderflow.
    """
    x = np.array(x0, dtype=np.float64)
    dxdt = rhs(0.0, x)
    t_end, h0, dt_save, tolerance = float(t_end), float(h0), float(dt_save), float(tolerance)
    stats = StepStatistics(t_end=t_end, h_min=h0)

    t = 0.0
    t_save = 0.0
    h = h0
    n_samples = 0

    with tqdm(total=t_end, unit="t", disable=not progress, desc="Integrating") as bar:
        while t < t_end:
            t_prev = t
            status, t, h = bogacki_shampine_step(t, x, dxdt, h, tolerance)
            stats.n_steps += 1

            if status == UNDERFLOW:
                return StepSizeUnderflow(t=t, h=h, statistics=stats)
            if status == ACCEPTED:
                stats.n_accepted += 1
                bar.update(min(t, t_end) - min(t_prev, t_end))
            else:
                logger.debug(f"rejected step at t={t:.6g}, retrying with h={h:.3e}")

            if h < stats.h_min:
                stats.h_min = h
            elif h > stats.h_max:
                stats.h_max = h

            # a rejected step leaves t unchanged, so it never yields a new sample
            if status == ACCEPTED and t > t_save:
                if on_sample is not None:
                    on_sample(t, x)
                n_samples += 1
                t_save += dt_save

    return IntegrationSuccess(t=t, state=x, statistics=stats, n_samples=n_samples)


def simulate_reference(x0, t_eval, tolerance=TOLERANCE):
    """
    Integrate the same network with scipy's RK23 (the Bogacki-Shampine pair).

    Used to cross-check the hand-rolled driver; scipy picks its own step
    sequence and interpolates to t_eval with its dense output.

    Args:
        x0 (array-like): Initial state.
        t_eval (array-like): Increasing output times, all >= 0.
        tolerance (float): Used as both atol and rtol.

    Returns:
        np.ndarray: States at t_eval, shape (len(t_eval), N_SPECIES).
    """
    t_eval = np.asarray(t_eval, dtype=np.float64)
    x0 = np.asarray(x0, dtype=np.float64)

    sol = solve_ivp(
        lambda t, y: rhs(t, np.ascontiguousarray(y)),
        (0.0, float(t_eval[-1])),
        x0,
        method="RK23",
        t_eval=t_eval,
        atol=tolerance,
        rtol=tolerance,
    )
    if not sol.success:
        raise RuntimeError(f"Reference integration failed: {sol.message}")
    return sol.y.T
