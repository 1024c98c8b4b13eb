# 文件: PyPFCP/pfcp/materials/models/polycrystal_elastic.py
"""
多晶插值线弹性材料

由序参量插值得到局部弹性张量，计算线弹性应力 σ = C : ε，并输出
晶体旋转张量和弹性张量对各序参量的导数。
"""

import numpy as np
from typing import Optional

from ..interfaces import Material, PointFields, StressResult
from ..grains.interpolator import PolycrystalElasticityInterpolator
from ..tensors import double_contract, four_to_voigt, tensor_to_voigt


class PolycrystalElasticMaterial(Material):
    """
    多晶插值线弹性

    PointFields 需提供 order_parameters 和 element_id；strain 缺省时按零应变处理
    (只需要弹性张量及其导数的场合)。

    Example:
        mat = PolycrystalElasticMaterial(interpolator)
        result = mat.compute_stress(PointFields(strain=eps, order_parameters=ops, element_id=3))
        result.properties['d_elasticity'][0]
    """

    def __init__(self, interpolator: PolycrystalElasticityInterpolator):
        self.interpolator = interpolator

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
        ops = fields.require('order_parameters')
        out = self.interpolator.compute(ops, fields.element_id)

        strain = np.zeros((3, 3)) if fields.strain is None else np.asarray(fields.strain, dtype=float)
        stress = double_contract(out.elasticity, strain)

        return StressResult(
            stress=tensor_to_voigt(stress),
            tangent=four_to_voigt(out.elasticity),
            state=None,
            is_plastic=False,
            stress_type='cauchy',
            properties={
                'elasticity': out.elasticity,
                'crysrot': out.crysrot,
                'd_elasticity': out.d_elasticity,
            },
        )

    def __repr__(self) -> str:
        return f"PolycrystalElasticMaterial({self.interpolator})"
