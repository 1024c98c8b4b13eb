# 文件: PyPFCP/tests/test_polycrystal.py
"""
多晶弹性插值与晶粒数据服务单元测试
"""

import numpy as np
import pytest

from pfcp.materials import (
    CubicElastic,
    EulerAngles,
    GrainDataTracker,
    PointFields,
    PolycrystalElasticMaterial,
    PolycrystalElasticityInterpolator,
    interpolation_weight,
    interpolation_weight_derivative,
)
from pfcp.materials.grains import J_TO_EV
from pfcp.materials.tensors import double_contract, euler_to_rotation


class TestInterpolationWeight:
    """测试插值核"""

    def test_end_points(self):
        """测试 h(0)=0, h(0.5)=0.5, h(1)=1"""
        assert interpolation_weight(0.0) == pytest.approx(0.0, abs=1e-15)
        assert interpolation_weight(0.5) == pytest.approx(0.5)
        assert interpolation_weight(1.0) == pytest.approx(1.0)

    def test_derivative(self):
        """测试导数与差分一致"""
        h = 1e-6
        for op in [0.1, 0.3, 0.5, 0.9]:
            fd = (interpolation_weight(op + h) - interpolation_weight(op - h)) / (2 * h)
            assert interpolation_weight_derivative(op) == pytest.approx(fd, rel=1e-6)


class TestGrainDataTracker:
    """测试晶粒数据服务"""

    def setup_method(self):
        """测试准备"""
        self.cubic = CubicElastic(170e3, 124e3, 75e3)
        self.orientations = {0: EulerAngles(0.0, 0.0, 0.0), 1: EulerAngles(30.0, 40.0, 50.0)}

    def test_lookup(self):
        """测试映射与数据查询"""
        tracker = GrainDataTracker.from_cubic(self.cubic, self.orientations, {7: [1, None, 0]})
        assert tracker.get_var_to_feature_vector(7) == (1, None, 0)
        assert tracker.get_var_to_feature_vector(8) == ()
        assert np.allclose(tracker.get_data(0), self.cubic.C)
        assert tracker.num_grains == 2

    def test_data_read_only(self):
        """测试晶粒数据只读"""
        tracker = GrainDataTracker.from_cubic(self.cubic, self.orientations, {0: [0]})
        with pytest.raises(ValueError):
            tracker.get_data(0)[0, 0, 0, 0] = 1.0

    def test_unknown_grain(self):
        """测试未知晶粒"""
        tracker = GrainDataTracker.from_orientations(self.orientations, {0: [0, 1]})
        with pytest.raises(ValueError):
            tracker.get_data(5)

    def test_dangling_reference(self):
        """测试映射引用不存在的晶粒"""
        with pytest.raises(ValueError):
            GrainDataTracker.from_orientations(self.orientations, {0: [0, 3]})


class TestPolycrystalElasticityInterpolator:
    """测试多晶弹性插值"""

    def setup_method(self):
        """测试准备"""
        self.cubic = CubicElastic(170e3, 124e3, 75e3)
        self.orientations = {0: EulerAngles(0.0, 0.0, 0.0), 1: EulerAngles(30.0, 40.0, 50.0)}
        var_to_feature = {0: [0, 1, None], 1: [1, None, None], 2: [None, None, None]}
        self.elastic_tracker = GrainDataTracker.from_cubic(
            self.cubic, self.orientations, var_to_feature
        )
        self.euler_tracker = GrainDataTracker.from_orientations(self.orientations, var_to_feature)
        self.interp = PolycrystalElasticityInterpolator(
            self.elastic_tracker, self.euler_tracker, op_num=3
        )

    def test_single_active_grain(self):
        """测试单一活动晶粒: C 等于该晶粒张量，导数为零"""
        out = self.interp.compute([0.0, 1.0, 0.0], element_id=0)
        C1 = self.elastic_tracker.get_data(1)
        assert np.allclose(out.elasticity, C1)
        for dC in out.d_elasticity:
            assert np.allclose(dC, 0.0, atol=1e-8)

        expected_rot = euler_to_rotation([30.0, 40.0, 50.0]).T
        assert np.allclose(out.crysrot, expected_rot)

    def test_only_grain_in_element(self):
        """测试单元内仅一个晶粒时与序参量取值无关"""
        out = self.interp.compute([0.7, 0.2, 0.0], element_id=1)
        assert np.allclose(out.elasticity, self.elastic_tracker.get_data(1))

    def test_no_active_grain(self):
        """测试无活动晶粒: 返回零张量而非 NaN"""
        out = self.interp.compute([0.5, 0.5, 0.5], element_id=2)
        assert np.all(np.isfinite(out.elasticity))
        assert np.allclose(out.elasticity, 0.0)
        assert np.allclose(out.crysrot, np.eye(3))

    def test_unregistered_element(self):
        """测试未登记单元按无活动晶粒处理"""
        out = self.interp.compute([1.0, 0.0, 0.0], element_id=99)
        assert np.allclose(out.elasticity, 0.0)

    def test_half_weights(self):
        """测试等权重插值"""
        out = self.interp.compute([0.5, 0.5, 0.0], element_id=0)
        C0 = self.elastic_tracker.get_data(0)
        C1 = self.elastic_tracker.get_data(1)
        assert np.allclose(out.elasticity, 0.5 * (C0 + C1))

        expected = np.pi / 2 * (C0 - C1) / 2 * self.interp.unit_factor
        assert np.allclose(out.d_elasticity[0], expected)

    def test_derivative_finite_difference(self):
        """测试 dC/dop 与差分一致 (换算单位后)"""
        ops = np.array([0.7, 0.4, 0.0])
        out = self.interp.compute(ops, element_id=0)
        h = 1e-6
        for i in range(2):
            dp = ops.copy()
            dm = ops.copy()
            dp[i] += h
            dm[i] -= h
            Cp = self.interp.compute(dp, element_id=0).elasticity
            Cm = self.interp.compute(dm, element_id=0).elasticity
            fd = (Cp - Cm) / (2 * h) * self.interp.unit_factor
            assert np.allclose(out.d_elasticity[i], fd, rtol=1e-5, atol=1e-6)

        # 无晶粒的序参量导数为零
        assert np.allclose(out.d_elasticity[2], 0.0)

    def test_idempotent(self):
        """测试相同输入结果逐位一致"""
        ops = [0.3, 0.8, 0.1]
        a = self.interp.compute(ops, element_id=0)
        b = self.interp.compute(ops, element_id=0)
        assert np.array_equal(a.elasticity, b.elasticity)
        assert np.array_equal(a.crysrot, b.crysrot)

    def test_unit_factor(self):
        """测试单位换算系数"""
        assert self.interp.unit_factor == pytest.approx(J_TO_EV * 1e-27 * 1e6)

    def test_wrong_op_count(self):
        """测试序参量个数不符"""
        with pytest.raises(ValueError):
            self.interp.compute([1.0, 0.0], element_id=0)

    def test_map_longer_than_op_num(self):
        """测试晶粒映射长于 op_num"""
        tracker = GrainDataTracker.from_orientations(self.orientations, {0: [0, 1, None, None]})
        interp = PolycrystalElasticityInterpolator(self.elastic_tracker, tracker, op_num=3)
        with pytest.raises(ValueError):
            interp.compute([1.0, 0.0, 0.0], element_id=0)

    def test_invalid_configuration(self):
        """测试非法配置"""
        with pytest.raises(ValueError):
            PolycrystalElasticityInterpolator(self.elastic_tracker, self.euler_tracker, op_num=0)
        with pytest.raises(ValueError):
            PolycrystalElasticityInterpolator(
                self.elastic_tracker, self.euler_tracker, op_num=3, length_scale=0.0
            )


class TestPolycrystalElasticMaterial:
    """测试多晶插值线弹性材料"""

    def setup_method(self):
        """测试准备"""
        cubic = CubicElastic(170e3, 124e3, 75e3)
        orientations = {0: EulerAngles(10.0, 20.0, 30.0)}
        var_to_feature = {4: [0, None]}
        self.elastic_tracker = GrainDataTracker.from_cubic(cubic, orientations, var_to_feature)
        euler_tracker = GrainDataTracker.from_orientations(orientations, var_to_feature)
        self.mat = PolycrystalElasticMaterial(
            PolycrystalElasticityInterpolator(self.elastic_tracker, euler_tracker, op_num=2)
        )

    def test_linear_elastic_stress(self):
        """测试 σ = C : ε"""
        strain = np.array([[1e-3, 2e-4, 0.0], [2e-4, 0.0, 0.0], [0.0, 0.0, -5e-4]])
        result = self.mat.compute_stress(
            PointFields(strain=strain, order_parameters=[1.0, 0.0], element_id=4)
        )
        sigma = double_contract(self.elastic_tracker.get_data(0), strain)
        assert np.allclose(result.stress, [sigma[0, 0], sigma[1, 1], sigma[2, 2],
                                           sigma[1, 2], sigma[0, 2], sigma[0, 1]])
        assert result.stress_type == 'cauchy'
        assert len(result.properties['d_elasticity']) == 2

    def test_zero_strain_default(self):
        """测试缺省应变按零处理"""
        result = self.mat.compute_stress(PointFields(order_parameters=[1.0, 0.0], element_id=4))
        assert np.allclose(result.stress, 0.0)
        assert np.allclose(result.properties['elasticity'], self.elastic_tracker.get_data(0))

    def test_missing_order_parameters(self):
        """测试缺少序参量"""
        with pytest.raises(ValueError):
            self.mat.compute_stress(PointFields(strain=np.zeros((3, 3))))


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
