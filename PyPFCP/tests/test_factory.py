# 文件: PyPFCP/tests/test_factory.py
"""
材料工厂单元测试
"""

import numpy as np
import pytest

from pfcp.materials import (
    CrystalPlasticitySettings,
    CrystalPlasticityW0p,
    CubicElastic,
    DamageSplitElasticMaterial,
    EulerAngles,
    GrainDataTracker,
    IsotropicElastic,
    MaterialFactory,
    PointFields,
    PolycrystalElasticMaterial,
)


class TestMaterialFactory:
    """测试工厂创建与配置检查"""

    def test_crystal_plasticity_from_dict(self):
        """测试由属性字典创建晶体塑性材料"""
        mat = MaterialFactory.create('Cu', {
            'type': 'crystal_plasticity',
            'elastic': {'C11': 168.4e3, 'C12': 121.4e3, 'C44': 75.4e3},
            'flow': {'a0': 0.002, 'xm': 0.05},
            'hardening': {'h0': 400.0, 'tau_init': 50.0, 'tau_sat': 100.0},
            'C0': 0.1,
            'C1': 0.05,
            'euler_angles': [10.0, 20.0, 30.0],
            'settings': {'maxiter': 30, 'max_substep_iter': 3},
        })
        assert isinstance(mat, CrystalPlasticityW0p)
        assert isinstance(mat.elastic, CubicElastic)
        assert mat.C0 == 0.1 and mat.C1 == 0.05
        assert mat.viscosity.time_scale == 1.0
        assert mat.flow_rule.a0 == 0.002
        assert mat.hardening.tau_init == 50.0
        assert mat.settings.maxiter == 30
        assert mat.settings.max_substep_iter == 3
        assert np.allclose(mat.create_state().gss, 50.0)

    def test_crystal_plasticity_isotropic_elastic(self):
        """测试 'elastic' 段使用 E/nu"""
        mat = MaterialFactory.create('iso', {
            'type': 'crystal_plasticity',
            'elastic': {'E': 200e3, 'nu': 0.3},
        })
        assert isinstance(mat.elastic, IsotropicElastic)

    def test_settings_instance_and_time_scale(self):
        """测试 'settings' 可直接给出 CrystalPlasticitySettings 实例"""
        settings = CrystalPlasticitySettings(maxiter=20)
        mat = MaterialFactory.create('Cu', {
            'type': 'crystal_plasticity',
            'elastic': {'C11': 168.4e3, 'C12': 121.4e3, 'C44': 75.4e3},
            'C1': 0.05,
            'time_scale': 1e-3,
            'settings': settings,
        })
        assert mat.settings is settings
        assert mat.viscosity.time_scale == 1e-3

    def test_invalid_settings_type(self):
        """测试 'settings' 类型非法"""
        with pytest.raises(ValueError):
            MaterialFactory.create('Cu', {
                'type': 'crystal_plasticity',
                'elastic': {'E': 200e3, 'nu': 0.3},
                'settings': [('maxiter', 20)],
            })

    def test_damage_split_from_dict(self):
        """测试由属性字典创建相场断裂材料"""
        mat = MaterialFactory.create('concrete', {
            'type': 'damage_split', 'E': 30e3, 'nu': 0.2, 'kdamage': 1e-5,
        })
        assert isinstance(mat, DamageSplitElasticMaterial)
        assert mat.kdamage == 1e-5
        result = mat.compute_stress(PointFields(strain=np.diag([1e-4, 0.0, 0.0]), damage=0.0))
        assert result.stress[0] > 0

    def test_polycrystal_from_dict(self):
        """测试由属性字典创建多晶插值材料"""
        cubic = CubicElastic(170e3, 124e3, 75e3)
        orientations = {0: EulerAngles(0.0, 0.0, 0.0)}
        mapping = {0: [0]}
        mat = MaterialFactory.create('grains', {
            'type': 'polycrystal_elastic',
            'grain_tracker': GrainDataTracker.from_cubic(cubic, orientations, mapping),
            'grain_tracker_crysrot': GrainDataTracker.from_orientations(orientations, mapping),
            'op_num': 1,
            'length_scale': 1e-6,
        })
        assert isinstance(mat, PolycrystalElasticMaterial)
        assert mat.interpolator.length_scale == 1e-6
        assert mat.interpolator.pressure_scale == 1e6

    def test_unknown_type(self):
        """测试未知材料类型"""
        with pytest.raises(ValueError):
            MaterialFactory.create('x', {'type': 'j2'})

    def test_missing_parameters(self):
        """测试缺少必需参数"""
        with pytest.raises(ValueError):
            MaterialFactory.create('x', {'type': 'damage_split', 'E': 30e3})
        with pytest.raises(ValueError):
            MaterialFactory.create('x', {'type': 'polycrystal_elastic', 'op_num': 2})
        with pytest.raises(ValueError):
            MaterialFactory.create('x', {'type': 'crystal_plasticity'})
        with pytest.raises(ValueError):
            MaterialFactory.create('x', {'type': 'crystal_plasticity', 'elastic': {'C11': 1.0}})

    def test_invalid_values(self):
        """测试参数取值非法"""
        with pytest.raises(ValueError):
            MaterialFactory.create('x', {
                'type': 'damage_split', 'E': 30e3, 'nu': 0.2, 'kdamage': 0.0,
            })
        with pytest.raises(ValueError):
            MaterialFactory.create_crystal_plasticity(
                CubicElastic(170e3, 124e3, 75e3), euler_angles=(0.0, 0.0)
            )
        with pytest.raises(ValueError):
            MaterialFactory.create('x', {
                'type': 'crystal_plasticity',
                'elastic': {'E': 200e3, 'nu': 0.3},
                'C0': -1.0,
            })


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
