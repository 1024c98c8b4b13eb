# 文件: PyPFCP/pfcp/materials/elastic/isotropic.py
"""
各向同性弹性

损伤分解模型以 (λ, μ) 为基本参数，C 与 D 均由 tensors 中的构造函数给出。
"""

import numpy as np
from typing import Tuple

from ..tensors import four_to_voigt, isotropic_four


class IsotropicElastic:
    """
    由 (E, ν) 给定的各向同性弹性

    Example:
        elastic = IsotropicElastic(E=210e3, nu=0.3)
        lam, mu = elastic.lam, elastic.mu
    """

    def __init__(self, E: float, nu: float):
        if E <= 0:
            raise ValueError(f"Young's modulus must be positive, got {E}")
        if not (-1.0 < nu < 0.5):
            raise ValueError(f"Poisson's ratio must be in (-1, 0.5), got {nu}")

        self.E = float(E)
        self.nu = float(nu)

        self._lam = self.E * self.nu / ((1 + self.nu) * (1 - 2 * self.nu))
        self._mu = 0.5 * self.E / (1 + self.nu)

        self._C = isotropic_four(self._lam, self._mu)
        self._D = four_to_voigt(self._C)

    @property
    def lam(self) -> float:
        """λ"""
        return self._lam

    @property
    def mu(self) -> float:
        """μ (剪切模量)"""
        return self._mu

    @property
    def K(self) -> float:
        """K = λ + 2μ/3"""
        return self._lam + 2.0 * self._mu / 3.0

    @property
    def C(self) -> np.ndarray:
        return self._C

    @property
    def D(self) -> np.ndarray:
        return self._D

    def __repr__(self) -> str:
        return f"IsotropicElastic(E={self.E:.2e}, nu={self.nu:.3f})"


def lame_from_tensor(C: np.ndarray) -> Tuple[float, float]:
    """读取各向同性张量的 λ = C_0011, μ = C_0101"""
    return float(C[0, 0, 1, 1]), float(C[0, 1, 0, 1])
