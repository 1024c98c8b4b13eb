# 文件: PyPFCP/pfcp/materials/models/damage_split.py
"""
相场断裂弹性材料 (拉压分解)

将 StrainSplitDamage 包装为 Material，读取积分点应变和损伤变量，
并输出损伤演化方程 Jacobian 所需的导数。
"""

import numpy as np
from typing import Optional

from ..interfaces import Material, PointFields, StressResult, ElasticModel
from ..elastic.isotropic import lame_from_tensor
from ..damage.strain_split import StrainSplitDamage
from ..tensors import four_to_voigt, tensor_to_voigt


class DamageSplitElasticMaterial(Material):
    """
    各向同性弹性 + 拉压分解损伤

    λ 与 μ 从弹性张量分量 C_0011, C_0101 读取。若 PointFields 提供了
    elasticity，则优先使用；切线模量取未退化弹性张量。

    Example:
        mat = DamageSplitElasticMaterial(IsotropicElastic(E=210e3, nu=0.3), kdamage=1e-6)
        result = mat.compute_stress(PointFields(strain=eps, damage=0.4))
        result.properties['G0_pos']
    """

    def __init__(self, elastic: ElasticModel, kdamage: float = 1e-6):
        """
        Args:
            elastic: 各向同性弹性模型 (需提供 C)
            kdamage: 完全损伤时的残余刚度
        """
        self.elastic = elastic
        self.split = StrainSplitDamage(kdamage)

    @property
    def kdamage(self) -> float:
        return self.split.kdamage

    @property
    def stress_type(self):
        return 'cauchy'

    def create_state(self) -> None:
        """无历史变量"""
        return None

    def compute_stress(
        self,
        fields: PointFields,
        state: Optional[object] = None,
        dt: float = 1.0
    ) -> StressResult:
        """
        计算退化应力

        Args:
            fields: 需提供 strain 与 damage
            state: 不使用
            dt: 不使用
        """
        strain = np.asarray(fields.require('strain'), dtype=float)
        C = self.elastic.C if fields.elasticity is None else np.asarray(fields.elasticity, dtype=float)
        lam, mu = lame_from_tensor(C)

        out = self.split.compute(strain, float(fields.require('damage')), lam, mu)

        return StressResult(
            stress=tensor_to_voigt(out.stress),
            tangent=four_to_voigt(C),
            state=None,
            is_plastic=False,
            stress_type='cauchy',
            properties={
                'stress_tensor': out.stress,
                'G0_pos': out.G0_pos,
                'dG0_pos_dstrain': out.dG0_pos_dstrain,
                'dstress_dc': out.dstress_dc,
                'stress0pos': out.stress0pos,
                'stress0neg': out.stress0neg,
                'principal_strains': out.eigval,
                'positive_principal_strains': out.epos,
            },
        )

    def __repr__(self) -> str:
        return f"DamageSplitElasticMaterial(elastic={self.elastic}, kdamage={self.kdamage:.1e})"
