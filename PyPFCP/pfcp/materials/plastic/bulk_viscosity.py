# 文件: PyPFCP/pfcp/materials/plastic/bulk_viscosity.py
"""
人工体积粘性

在压缩加载时向应力残差加入附加压力，抑制塑性快速演化中的数值振荡。
压力由体积应变率给出，参考时间 t_ref 将其无量纲化:

    Δεv = (J - J_old) / J_old
    d   = t_ref Δεv / Δt
    q   = Kb (C0 d² - C1 d)     (d < 0)
    q   = 0                      (d >= 0)

C0 为 Von Neumann (二次) 系数，C1 为 Landshoff (线性) 系数。
"""

import numpy as np


class BulkViscosity:
    """
    Von Neumann / Landshoff 人工体积粘性

    Attributes:
        C0: 二次项系数
        C1: 线性项系数
        time_scale: 参考时间 t_ref

    Example:
        visc = BulkViscosity(C0=0.1, C1=0.05)
        S_v = visc.pk2_contribution(F, F_old, Fp_old_inv, Kb, dt)
    """

    def __init__(self, C0: float = 0.0, C1: float = 0.0, time_scale: float = 1.0):
        if C0 < 0 or C1 < 0:
            raise ValueError(f"Viscosity coefficients must be non-negative, got C0={C0}, C1={C1}")
        if time_scale <= 0:
            raise ValueError(f"Viscosity time scale must be positive, got {time_scale}")
        self.C0 = float(C0)
        self.C1 = float(C1)
        self.time_scale = float(time_scale)

    @property
    def active(self) -> bool:
        return self.C0 > 0 or self.C1 > 0

    def pressure(self, J: float, J_old: float, bulk_modulus: float, dt: float) -> float:
        """
        粘性压力 q (压缩时为正)

        Args:
            J: 当前体积比 det F
            J_old: 上一步体积比
            bulk_modulus: 体积模量
            dt: 时间增量
        """
        rate = self.time_scale * (J - J_old) / (J_old * dt)
        if rate >= 0.0:
            return 0.0
        return bulk_modulus * (self.C0 * rate * rate - self.C1 * rate)

    def pk2_contribution(
        self,
        F: np.ndarray,
        F_old: np.ndarray,
        fp_old_inv: np.ndarray,
        bulk_modulus: float,
        dt: float,
    ) -> np.ndarray:
        """
        中间构型上的粘性 PK2 应力 S_v = -q J Ce⁻¹

        Ce 取预测值 Fe_tr = F Fp_old⁻¹，在局部 Newton 迭代内保持常量。
        """
        if not self.active:
            return np.zeros((3, 3))
        J = float(np.linalg.det(F))
        q = self.pressure(J, float(np.linalg.det(F_old)), bulk_modulus, dt)
        if q == 0.0:
            return np.zeros((3, 3))
        fe_tr = F @ fp_old_inv
        ce_inv = np.linalg.inv(fe_tr.T @ fe_tr)
        return -q * J * ce_inv

    def __repr__(self) -> str:
        return (f"BulkViscosity(C0={self.C0:.3e}, C1={self.C1:.3e}, "
                f"time_scale={self.time_scale:.3e})")
