# 文件: PyPFCP/pfcp/materials/state.py
"""
材料状态管理

CrystalPlasticityState: 晶体塑性材料的状态容器，存储积分点的历史变量
"""

from dataclasses import dataclass, field
import numpy as np


@dataclass
class CrystalPlasticityState:
    """
    晶体塑性材料状态容器

    存储积分点上一收敛步 (old) 或本步求解结果 (current) 的历史变量。
    宿主保存两份: committed (old) 在时间步被接受时才被 current 覆盖。

    Attributes:
        pk2: 中间构型第二类 PK 应力 (3,3)
        fp: 塑性变形梯度 Fp (3,3)
        gss: 各滑移系滑移阻力 (nss,)
        accumulated_slip: 累积滑移量 Σ|Δγ|
        W0e: 弹性 (可恢复) 能量密度
        W0p: 累积塑性功密度 (单调不减)
        deformation_gradient: 该状态对应的变形梯度 F (3,3)

    Example:
        state = material.create_state()
        result = material.compute_stress(fields, state, dt)
        committed = result.state.copy()  # 收敛后保存
    """

    pk2: np.ndarray = field(default_factory=lambda: np.zeros((3, 3)))
    fp: np.ndarray = field(default_factory=lambda: np.eye(3))
    gss: np.ndarray = field(default_factory=lambda: np.zeros(0))

    # 标量内变量
    accumulated_slip: float = 0.0
    W0e: float = 0.0
    W0p: float = 0.0

    deformation_gradient: np.ndarray = field(default_factory=lambda: np.eye(3))

    def copy(self) -> 'CrystalPlasticityState':
        """
        深拷贝

        用于在时间步收敛后保存 committed 状态。

        Returns:
            CrystalPlasticityState: 独立的状态副本
        """
        return CrystalPlasticityState(
            pk2=self.pk2.copy(),
            fp=self.fp.copy(),
            gss=self.gss.copy(),
            accumulated_slip=self.accumulated_slip,
            W0e=self.W0e,
            W0p=self.W0p,
            deformation_gradient=self.deformation_gradient.copy()
        )

    def clone(self) -> 'CrystalPlasticityState':
        """深拷贝 (copy 的别名)"""
        return self.copy()

    def reset(self, gss_init: np.ndarray) -> None:
        """重置为初始状态"""
        self.pk2 = np.zeros((3, 3))
        self.fp = np.eye(3)
        self.gss = np.array(gss_init, dtype=float)
        self.accumulated_slip = 0.0
        self.W0e = 0.0
        self.W0p = 0.0
        self.deformation_gradient = np.eye(3)

    def __repr__(self) -> str:
        return (
            f"CrystalPlasticityState(W0p={self.W0p:.6e}, "
            f"acc_slip={self.accumulated_slip:.6e}, "
            f"gss_max={np.max(self.gss) if self.gss.size else 0.0:.3e})"
        )
