import numpy as np

from pixeldither.processing.rng import Lcg, generate_blue_noise

MULTIPLIER = 6364136223846793005
MASK = (1 << 64) - 1


class TestLcg:
    def test_known_sequence(self):
        rng = Lcg(0)
        assert rng.next() == 1
        assert rng.next() == MULTIPLIER + 1
        assert rng.next() == ((MULTIPLIER + 1) * MULTIPLIER + 1) & MASK

    def test_wraps_to_64_bits(self):
        rng = Lcg(MASK)
        value = rng.next()
        assert value == (MASK * MULTIPLIER + 1) & MASK
        assert 0 <= value <= MASK

    def test_same_seed_same_sequence(self):
        a = Lcg(42)
        b = Lcg(42)
        assert [a.next() for _ in range(10)] == [b.next() for _ in range(10)]

    def test_unit_samples_in_range(self):
        rng = Lcg(7)
        samples = [rng.next_unit() for _ in range(1000)]
        assert min(samples) >= 0.0
        assert max(samples) <= 1.0

    def test_uniform_matches_next_unit(self):
        expected_rng = Lcg(99)
        expected = [expected_rng.next_unit() for _ in range(50)]

        rng = Lcg(99)
        samples = rng.uniform(50)

        np.testing.assert_allclose(samples, expected, rtol=1e-15)
        assert rng.state == expected_rng.state


class TestBlueNoise:
    def test_shape_and_range(self):
        noise = generate_blue_noise(20, 12, Lcg(12345))
        assert noise.shape == (12, 20)
        assert noise.min() >= 0.0
        assert noise.max() <= 1.0

    def test_values_are_intensity_buckets(self):
        noise = generate_blue_noise(16, 16, Lcg(12345))
        buckets = noise * 255.0
        assert np.allclose(buckets, np.round(buckets))

    def test_one_cell_always_left_unclaimed(self):
        # Targets are capped at total - 1
        noise = generate_blue_noise(8, 8, Lcg(12345))
        assert (noise == 0.0).sum() >= 1

    def test_deterministic(self):
        a = generate_blue_noise(32, 16, Lcg(12345))
        b = generate_blue_noise(32, 16, Lcg(12345))
        assert np.array_equal(a, b)

    def test_seed_changes_field(self):
        a = generate_blue_noise(32, 32, Lcg(12345))
        b = generate_blue_noise(32, 32, Lcg(1))
        assert not np.array_equal(a, b)

    def test_consumes_generator(self):
        rng = Lcg(12345)
        generate_blue_noise(8, 8, rng)
        assert rng.state != 12345

    def test_power_of_two_field_is_mostly_claimed(self):
        # Sampling coordinates from the low state bits would claim only a few cells here
        noise = generate_blue_noise(16, 16, Lcg(12345))
        assert (noise > 0.0).sum() > 200

    def test_covers_intensity_range(self):
        noise = generate_blue_noise(64, 64, Lcg(12345))
        # Dart throwing claims most cells, spread over the whole range
        assert (noise > 0.0).mean() > 0.9
        assert noise.max() > 0.9
        assert noise[noise > 0.0].min() < 0.1
