# 文件: PyPFCP/pfcp/materials/plastic/__init__.py
"""
晶体塑性组件模块

提供晶体塑性本构的核心组件:
- 滑移系 (slip_systems): SlipSystems, FCC_111_110
- 流动法则 (flow_rule): PowerLawSlip
- 硬化规律 (hardening): ConstantResistance, SaturationHardening
- 人工体积粘性 (bulk_viscosity): BulkViscosity
"""

from .slip_systems import SlipSystems, FCC_111_110
from .flow_rule import PowerLawSlip
from .hardening import ConstantResistance, SaturationHardening
from .bulk_viscosity import BulkViscosity

__all__ = [
    # 滑移系
    'SlipSystems',
    'FCC_111_110',

    # 流动法则
    'PowerLawSlip',

    # 硬化规律
    'ConstantResistance',
    'SaturationHardening',

    # 人工粘性
    'BulkViscosity',
]
