# 文件: PyPFCP/pfcp/__init__.py
"""
PyPFCP 核心模块

导出材料模型、状态管理和单点驱动器
"""

# ==============================================================================
# 材料系统
# ==============================================================================
from pfcp.materials import (
    # 核心接口
    Material,
    PointFields,
    StressResult,

    # 状态
    CrystalPlasticityState,

    # 工厂
    MaterialFactory,

    # 弹性组件
    IsotropicElastic,
    CubicElastic,

    # 多晶组件
    EulerAngles,
    GrainDataTracker,
    PolycrystalElasticityInterpolator,

    # 损伤组件
    StrainSplitDamage,

    # 预置模型
    CrystalPlasticityW0p,
    CrystalPlasticitySettings,
    DamageSplitElasticMaterial,
    PolycrystalElasticMaterial,

    # 辅助函数
    tensor_to_voigt,
    voigt_to_tensor,
)

# ==============================================================================
# 驱动器
# ==============================================================================
from pfcp.solver import MaterialPointDriver


__all__ = [
    # === 材料系统 ===
    'Material',
    'PointFields',
    'StressResult',
    'CrystalPlasticityState',
    'MaterialFactory',
    'IsotropicElastic',
    'CubicElastic',
    'EulerAngles',
    'GrainDataTracker',
    'PolycrystalElasticityInterpolator',
    'StrainSplitDamage',
    'CrystalPlasticityW0p',
    'CrystalPlasticitySettings',
    'DamageSplitElasticMaterial',
    'PolycrystalElasticMaterial',
    'tensor_to_voigt',
    'voigt_to_tensor',

    # === 驱动器 ===
    'MaterialPointDriver',
]
