# 文件: PyPFCP/tests/test_strain_split.py
"""
拉压分解相场断裂单元测试
"""

import numpy as np
import pytest

from pfcp.materials import (
    DamageSplitElasticMaterial,
    IsotropicElastic,
    PointFields,
    StrainSplitDamage,
    split_trace,
)
from pfcp.materials.tensors import double_contract


class TestSplitTrace:
    """测试迹分解"""

    def test_split_properties(self):
        """测试 etrpos - etrneg = etr，均非负且至多一个非零"""
        for etr in [-2.5e-3, -1e-12, 0.0, 1e-12, 3.7e-3, 1.0]:
            etrpos, etrneg = split_trace(etr)
            assert etrpos - etrneg == pytest.approx(etr, abs=1e-18)
            assert etrpos >= 0 and etrneg >= 0
            assert etrpos == 0 or etrneg == 0


class TestDegradation:
    """测试退化因子"""

    def test_monotone_and_bounded(self):
        """测试 xfac 在 [0,1] 上严格递减且不低于 kdamage"""
        split = StrainSplitDamage(kdamage=1e-6)
        cs = np.linspace(0.0, 1.0, 21)
        xfac = np.array([split.degradation(c) for c in cs])
        assert np.all(np.diff(xfac) < 0)
        assert np.all(xfac >= 1e-6)
        assert xfac[-1] == pytest.approx(1e-6)

    def test_non_positive_kdamage(self):
        """测试 kdamage 必须为正"""
        with pytest.raises(ValueError):
            StrainSplitDamage(kdamage=0.0)


class TestStrainSplitDamage:
    """测试应力分解"""

    def setup_method(self):
        """测试准备"""
        self.elastic = IsotropicElastic(E=210e3, nu=0.3)
        self.lam = self.elastic.lam
        self.mu = self.elastic.mu
        self.split = StrainSplitDamage(kdamage=1e-6)
        self.strain = np.array([
            [1.0e-3, 2.0e-4, 0.0],
            [2.0e-4, -3.0e-4, 1.0e-4],
            [0.0, 1.0e-4, 2.0e-4],
        ])

    def test_undamaged_recovers_elastic(self):
        """测试 c=0 时恢复线弹性应力"""
        out = self.split.compute(self.strain, 0.0, self.lam, self.mu)
        expected = double_contract(self.elastic.C, self.strain)
        assert np.allclose(out.stress0pos - out.stress0neg, expected)
        assert np.allclose(out.stress, expected, rtol=1e-5)

    def test_undamaged_recovers_elastic_in_compression(self):
        """测试 c=0 受压时恢复线弹性应力"""
        strain = -self.strain
        out = self.split.compute(strain, 0.0, self.lam, self.mu)
        assert np.allclose(out.stress, double_contract(self.elastic.C, strain), rtol=1e-5)

    def test_fully_damaged_tension(self):
        """测试 c=1 时拉伸应力按 kdamage 缩减"""
        out = self.split.compute(self.strain, 1.0, self.lam, self.mu)
        assert np.allclose(out.stress0neg, 0.0)
        assert np.allclose(out.stress, 1e-6 * out.stress0pos)

    def test_fully_damaged_compression_unaffected(self):
        """测试 c=1 时体积压缩部分不退化"""
        strain = np.diag([-1e-3, -2e-3, -1e-3])
        out = self.split.compute(strain, 1.0, self.lam, self.mu)
        Kb = self.lam + 2 * self.mu / 3
        etr = np.trace(strain)
        assert np.allclose(out.stress0neg, -Kb * etr * np.eye(3))
        assert np.allclose(out.stress, 1e-6 * out.stress0pos - out.stress0neg)

    def test_pure_volumetric_compression(self):
        """测试纯体积压缩: G0⁺ = 0，σ = -σ0⁻"""
        strain = -1e-3 * np.eye(3)
        out = self.split.compute(strain, 0.4, self.lam, self.mu)
        assert out.G0_pos == pytest.approx(0.0, abs=1e-20)
        assert np.allclose(out.stress0pos, 0.0)
        assert np.allclose(out.stress, -out.stress0neg)
        assert np.all(out.epos == 0.0)

    def test_driving_energy_derivative(self):
        """测试 dG0⁺/dε 与差分一致"""
        out = self.split.compute(self.strain, 0.3, self.lam, self.mu)
        h = 1e-9
        for i, j in [(0, 0), (1, 1), (0, 1), (1, 2)]:
            E = np.zeros((3, 3))
            E[i, j] += 0.5
            E[j, i] += 0.5
            Gp = self.split.compute(self.strain + h * E, 0.3, self.lam, self.mu).G0_pos
            Gm = self.split.compute(self.strain - h * E, 0.3, self.lam, self.mu).G0_pos
            fd = (Gp - Gm) / (2 * h)
            assert fd == pytest.approx(double_contract(out.dG0_pos_dstrain, E), rel=1e-5)

    def test_stress_damage_derivative(self):
        """测试 dσ/dc 与差分一致"""
        c, h = 0.35, 1e-6
        out = self.split.compute(self.strain, c, self.lam, self.mu)
        sp = self.split.compute(self.strain, c + h, self.lam, self.mu).stress
        sm = self.split.compute(self.strain, c - h, self.lam, self.mu).stress
        assert np.allclose((sp - sm) / (2 * h), out.dstress_dc, rtol=1e-6, atol=1e-8)

    def test_positive_principal_strains(self):
        """测试正主应变"""
        out = self.split.compute(np.diag([2e-3, -1e-3, 5e-4]), 0.0, self.lam, self.mu)
        assert np.allclose(np.sort(out.epos), [0.0, 5e-4, 2e-3])


class TestDamageSplitElasticMaterial:
    """测试相场断裂材料包装"""

    def setup_method(self):
        """测试准备"""
        self.elastic = IsotropicElastic(E=210e3, nu=0.3)
        self.mat = DamageSplitElasticMaterial(self.elastic, kdamage=1e-6)

    def test_outputs(self):
        """测试输出字段"""
        strain = np.diag([1e-3, 0.0, 0.0])
        result = self.mat.compute_stress(PointFields(strain=strain, damage=0.5))

        assert result.stress_type == 'cauchy'
        assert result.state is None
        assert result.converged
        assert np.allclose(result.tangent, self.elastic.D)
        for key in ('G0_pos', 'dG0_pos_dstrain', 'dstress_dc', 'stress_tensor'):
            assert key in result.properties

        sigma = result.properties['stress_tensor']
        assert result.stress[0] == pytest.approx(sigma[0, 0])
        assert sigma[0, 0] == pytest.approx((0.25 + 1e-6) * self.elastic.D[0, 0] * 1e-3)

    def test_elasticity_from_fields(self):
        """测试外部弹性张量优先"""
        other = IsotropicElastic(E=70e3, nu=0.33)
        strain = np.diag([1e-3, 0.0, 0.0])
        result = self.mat.compute_stress(PointFields(strain=strain, damage=0.0, elasticity=other.C))
        expected = double_contract(other.C, strain)
        assert result.stress[0] == pytest.approx(expected[0, 0], rel=1e-5)

    def test_missing_strain(self):
        """测试缺少应变"""
        with pytest.raises(ValueError):
            self.mat.compute_stress(PointFields(damage=0.1))

    def test_missing_damage(self):
        """测试缺少损伤变量时报错而非按无损伤计算"""
        with pytest.raises(ValueError):
            self.mat.compute_stress(PointFields(strain=np.diag([1e-3, 0.0, 0.0])))


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
