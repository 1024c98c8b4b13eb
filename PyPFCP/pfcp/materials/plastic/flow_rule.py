# 文件: PyPFCP/pfcp/materials/plastic/flow_rule.py
"""
滑移率法则模块

提供:
- PowerLawSlip: 幂律粘塑性滑移率

扩展指南:
    要添加新的流动法则，只需创建一个类实现:
    - slip_increments(tau, gss, dt) -> (dgamma, dgamma_dtau, ok)
"""

import numpy as np
from typing import Tuple


class PowerLawSlip:
    """
    幂律粘塑性滑移

    Δγ_α = a0 |τ_α / g_α|^(1/xm) sign(τ_α) Δt
    ∂Δγ_α/∂τ_α = a0 / xm |τ_α / g_α|^(1/xm - 1) / g_α Δt

    任一滑移系 |Δγ_α| 超过 slip_incr_tol 时判为失败，由上层子步或缩步处理。

    Attributes:
        a0: 参考滑移率
        xm: 应变率敏感指数
        slip_incr_tol: 单步滑移增量上限

    Example:
        flow = PowerLawSlip(a0=0.001, xm=0.1)
        dgamma, dgamma_dtau, ok = flow.slip_increments(tau, gss, dt=1.0)
    """

    def __init__(self, a0: float = 0.001, xm: float = 0.1, slip_incr_tol: float = 2e-2):
        if a0 <= 0 or xm <= 0:
            raise ValueError(f"a0 and xm must be positive, got a0={a0}, xm={xm}")
        if slip_incr_tol <= 0:
            raise ValueError(f"slip_incr_tol must be positive, got {slip_incr_tol}")
        self.a0 = float(a0)
        self.xm = float(xm)
        self.slip_incr_tol = float(slip_incr_tol)

    def slip_increments(
        self, tau: np.ndarray, gss: np.ndarray, dt: float
    ) -> Tuple[np.ndarray, np.ndarray, bool]:
        """
        计算滑移增量及其导数

        Args:
            tau: 分切应力 (nss,)
            gss: 滑移阻力 (nss,)，必须为正
            dt: 时间增量

        Returns:
            dgamma: 滑移增量 (nss,)
            dgamma_dtau: ∂Δγ/∂τ (nss,)
            ok: 所有增量均未超过 slip_incr_tol
        """
        ratio = np.abs(tau / gss)
        exponent = 1.0 / self.xm

        with np.errstate(over='ignore', invalid='ignore'):
            dgamma = self.a0 * ratio ** exponent * np.sign(tau) * dt
        if not np.all(np.isfinite(dgamma)) or np.any(np.abs(dgamma) > self.slip_incr_tol):
            return dgamma, np.zeros_like(dgamma), False

        # xm > 1 时 τ = 0 处导数奇异，取 0
        with np.errstate(divide='ignore'):
            dgamma_dtau = self.a0 / self.xm * ratio ** (exponent - 1.0) / gss * dt
        dgamma_dtau[~np.isfinite(dgamma_dtau)] = 0.0
        return dgamma, dgamma_dtau, True

    def __repr__(self) -> str:
        return f"PowerLawSlip(a0={self.a0:.2e}, xm={self.xm:.3f}, tol={self.slip_incr_tol:.1e})"
