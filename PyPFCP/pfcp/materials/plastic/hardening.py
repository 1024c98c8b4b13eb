# 文件: PyPFCP/pfcp/materials/plastic/hardening.py
"""
滑移阻力硬化规律模块

提供各种硬化模型:
- ConstantResistance: 无硬化 (滑移阻力保持初值)
- SaturationHardening: 饱和型自硬化/潜硬化

扩展指南:
    要添加新的硬化模型，只需创建一个类实现以下方法:
    - initial_resistance(nss) -> np.ndarray
    - update(gss_old, gss_tmp, dgamma, same_plane) -> np.ndarray
"""

import numpy as np


class ConstantResistance:
    """
    无硬化

    滑移阻力保持恒定: g_α = τ_init

    Example:
        hardening = ConstantResistance(tau_init=60.8)
    """

    def __init__(self, tau_init: float):
        """
        Args:
            tau_init: 初始滑移阻力
        """
        if tau_init <= 0:
            raise ValueError(f"Initial slip resistance must be positive, got {tau_init}")
        self.tau_init = float(tau_init)

    def initial_resistance(self, nss: int) -> np.ndarray:
        return np.full(nss, self.tau_init)

    def update(self, gss_old, gss_tmp, dgamma, same_plane) -> np.ndarray:
        """滑移阻力不变"""
        return np.array(gss_old, dtype=float, copy=True)

    def __repr__(self) -> str:
        return f"ConstantResistance(τ_init={self.tau_init:.2e})"


class SaturationHardening:
    """
    饱和型硬化

    hb_β = h0 |1 - g_β/τ_sat|^r sign(1 - g_β/τ_sat)
    g_α = g_α,old + Σ_β q_αβ hb_β |Δγ_β|

    q_αβ = 1 (同一滑移面), q (不同滑移面，潜硬化比)

    硬化模量在当前迭代值 g_tmp 处求值，增量从步初值 g_old 累加 (向后欧拉)。

    Attributes:
        r: 硬化指数
        h0: 初始硬化模量
        tau_init: 初始滑移阻力
        tau_sat: 饱和滑移阻力
        q: 潜硬化比

    Example:
        hardening = SaturationHardening(r=1.0, h0=541.5, tau_init=60.8, tau_sat=109.8)
        gss = hardening.update(gss_old, gss_tmp, dgamma, slip_systems.same_plane)
    """

    def __init__(
        self,
        r: float = 1.0,
        h0: float = 541.5,
        tau_init: float = 60.8,
        tau_sat: float = 109.8,
        q: float = 1.4,
    ):
        if tau_init <= 0 or tau_sat <= 0:
            raise ValueError(
                f"Slip resistances must be positive, got tau_init={tau_init}, tau_sat={tau_sat}"
            )
        if h0 < 0:
            raise ValueError(f"Hardening modulus must be non-negative, got {h0}")
        self.r = float(r)
        self.h0 = float(h0)
        self.tau_init = float(tau_init)
        self.tau_sat = float(tau_sat)
        self.q = float(q)

    def initial_resistance(self, nss: int) -> np.ndarray:
        return np.full(nss, self.tau_init)

    def hardening_moduli(self, gss: np.ndarray) -> np.ndarray:
        """各滑移系硬化模量 hb"""
        x = 1.0 - gss / self.tau_sat
        return self.h0 * np.abs(x) ** self.r * np.sign(x)

    def update(
        self,
        gss_old: np.ndarray,
        gss_tmp: np.ndarray,
        dgamma: np.ndarray,
        same_plane: np.ndarray,
    ) -> np.ndarray:
        """
        更新滑移阻力

        Args:
            gss_old: 步初滑移阻力 (nss,)
            gss_tmp: 当前迭代滑移阻力 (nss,)
            dgamma: 滑移增量 (nss,)
            same_plane: 共面矩阵 (nss, nss)

        Returns:
            新的滑移阻力 (nss,)
        """
        qab = np.where(same_plane, 1.0, self.q)
        hb = self.hardening_moduli(gss_tmp)
        return gss_old + qab @ (hb * np.abs(dgamma))

    def __repr__(self) -> str:
        return (
            f"SaturationHardening(r={self.r:.2f}, h0={self.h0:.2e}, "
            f"τ_init={self.tau_init:.2e}, τ_sat={self.tau_sat:.2e}, q={self.q:.2f})"
        )
