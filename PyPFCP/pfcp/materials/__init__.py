# 文件: PyPFCP/pfcp/materials/__init__.py
"""
PyPFCP 材料系统

分层架构:
- interfaces.py: 抽象基类、积分点输入/输出和协议
- tensors.py: 二阶/四阶张量代数
- state.py: 材料状态管理
- elastic/: 弹性模型组件
- grains/: 晶粒数据服务与多晶弹性插值
- damage/: 拉压分解相场断裂
- plastic/: 晶体塑性组件 (滑移系、流动法则、硬化、人工粘性)
- models/: 预置材料模型
- factory.py: 材料工厂

使用方法:
    from pfcp.materials import MaterialFactory, PointFields

    # 创建材料
    mat = MaterialFactory.create('Cu', {
        'type': 'crystal_plasticity',
        'elastic': {'C11': 168.4e3, 'C12': 121.4e3, 'C44': 75.4e3},
    })

    # 创建状态
    state = mat.create_state()

    # 计算应力
    result = mat.compute_stress(PointFields(F=F), state, dt=0.1)
    print(result.stress)                   # PK2 应力 Voigt 向量
    print(result.properties['W0p'])        # 累积塑性功
    print(result.converged)                # False 表示需要缩步

扩展指南:
    添加新流动法则:
        1. 在 plastic/flow_rule.py 添加新类
        2. 实现 slip_increments() 方法

    添加新硬化模型:
        1. 在 plastic/hardening.py 添加新类
        2. 实现 initial_resistance() 和 update() 方法

    添加新材料模型:
        1. 在 models/ 目录添加新文件
        2. 继承 Material 基类，实现 compute_stress() 和 create_state()
"""

# 核心接口
from .interfaces import (
    Material,
    PointFields,
    StressResult,
    ElasticModel,
    GrainDataProvider,
    SlipRateLaw,
    SlipHardeningLaw,
)

# Voigt 转换
from .tensors import tensor_to_voigt, voigt_to_tensor

# 状态管理
from .state import CrystalPlasticityState

# 工厂
from .factory import MaterialFactory

# 弹性组件
from .elastic import IsotropicElastic, CubicElastic, lame_from_tensor

# 多晶组件
from .grains import (
    EulerAngles,
    GrainDataTracker,
    PolycrystalElasticityInterpolator,
    PolycrystalElasticity,
    interpolation_weight,
    interpolation_weight_derivative,
)

# 损伤组件
from .damage import StrainSplitDamage, DamageSplitResult, split_trace

# 塑性组件
from .plastic import (
    SlipSystems,
    FCC_111_110,
    PowerLawSlip,
    ConstantResistance,
    SaturationHardening,
    BulkViscosity,
)

# 预置模型
from .models import (
    CrystalPlasticityW0p,
    CrystalPlasticitySettings,
    DamageSplitElasticMaterial,
    PolycrystalElasticMaterial,
)


__all__ = [
    # 核心接口
    'Material',
    'PointFields',
    'StressResult',
    'ElasticModel',
    'GrainDataProvider',
    'SlipRateLaw',
    'SlipHardeningLaw',

    # Voigt 转换
    'tensor_to_voigt',
    'voigt_to_tensor',

    # 状态
    'CrystalPlasticityState',

    # 工厂
    'MaterialFactory',

    # 弹性组件
    'IsotropicElastic',
    'CubicElastic',
    'lame_from_tensor',

    # 多晶组件
    'EulerAngles',
    'GrainDataTracker',
    'PolycrystalElasticityInterpolator',
    'PolycrystalElasticity',
    'interpolation_weight',
    'interpolation_weight_derivative',

    # 损伤组件
    'StrainSplitDamage',
    'DamageSplitResult',
    'split_trace',

    # 塑性组件
    'SlipSystems',
    'FCC_111_110',
    'PowerLawSlip',
    'ConstantResistance',
    'SaturationHardening',
    'BulkViscosity',

    # 预置模型
    'CrystalPlasticityW0p',
    'CrystalPlasticitySettings',
    'DamageSplitElasticMaterial',
    'PolycrystalElasticMaterial',
]
