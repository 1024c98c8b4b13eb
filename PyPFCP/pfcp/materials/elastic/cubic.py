# 文件: PyPFCP/pfcp/materials/elastic/cubic.py
"""
立方晶系弹性模型

提供:
- CubicElastic: 晶体坐标系下的立方弹性，可按欧拉角旋转到样品坐标系
"""

import numpy as np
from typing import Sequence

from ..tensors import cubic_four, four_to_voigt, rotate_four, euler_to_rotation


class CubicElastic:
    """
    立方晶系线弹性

    晶体坐标系下 Voigt 矩阵:
    | C11 C12 C12  0   0   0  |
    | C12 C11 C12  0   0   0  |
    | C12 C12 C11  0   0   0  |
    |  0   0   0  C44  0   0  |
    |  0   0   0   0  C44  0  |
    |  0   0   0   0   0  C44 |

    Example:
        cu = CubicElastic(C11=168.4e3, C12=121.4e3, C44=75.4e3)
        C_grain = cu.rotated([30.0, 45.0, 10.0])
    """

    def __init__(self, C11: float, C12: float, C44: float):
        if C44 <= 0 or C11 - C12 <= 0 or C11 + 2 * C12 <= 0:
            raise ValueError(
                f"Cubic constants are not positive definite: "
                f"C11={C11}, C12={C12}, C44={C44}"
            )
        self.C11 = float(C11)
        self.C12 = float(C12)
        self.C44 = float(C44)
        self._C = cubic_four(self.C11, self.C12, self.C44)

    @property
    def C(self) -> np.ndarray:
        """晶体坐标系四阶弹性张量"""
        return self._C

    @property
    def D(self) -> np.ndarray:
        """晶体坐标系 Voigt 弹性矩阵 (6,6)"""
        return four_to_voigt(self._C)

    @property
    def K(self) -> float:
        """体积模量 (C11 + 2 C12) / 3"""
        return (self.C11 + 2 * self.C12) / 3.0

    def rotated(self, euler_angles: Sequence[float]) -> np.ndarray:
        """
        旋转到样品坐标系

        Args:
            euler_angles: Bunge 欧拉角 (度)

        Returns:
            样品坐标系四阶弹性张量，旋转张量取 crysrot = R^T
        """
        crysrot = euler_to_rotation(euler_angles).T
        return rotate_four(self._C, crysrot)

    def __repr__(self) -> str:
        return f"CubicElastic(C11={self.C11:.3e}, C12={self.C12:.3e}, C44={self.C44:.3e})"
