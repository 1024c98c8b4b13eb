# 文件: PyPFCP/pfcp/materials/models/__init__.py
"""
预置材料模型

提供组装好的、可直接使用的材料模型:
- CrystalPlasticityW0p: 有限变形晶体塑性 (塑性功 + 人工体积粘性)
- DamageSplitElasticMaterial: 拉压分解相场断裂弹性
- PolycrystalElasticMaterial: 多晶插值线弹性
"""

from .crystal_plasticity import CrystalPlasticityW0p, CrystalPlasticitySettings
from .damage_split import DamageSplitElasticMaterial
from .polycrystal_elastic import PolycrystalElasticMaterial

__all__ = [
    'CrystalPlasticityW0p',
    'CrystalPlasticitySettings',
    'DamageSplitElasticMaterial',
    'PolycrystalElasticMaterial',
]
