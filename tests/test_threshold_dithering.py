import numpy as np
import pytest

from pixeldither.constants import PATTERN_4x4, WHITE_NOISE_SEED
from pixeldither.processing.dither.gradient import gradient_based_dither, horizontal_gradient
from pixeldither.processing.dither.halftone import halftone_circle_dither, halftone_diamond_dither
from pixeldither.processing.dither.noise import blue_noise_dither, random_threshold_dither, white_noise_dither
from pixeldither.processing.dither.ordered import (
    bayer_dither, clustered_dot_dither, pattern_dither, simple_threshold_dither, threshold_dither, tile_matrix,
)
from pixeldither.processing.rng import Lcg


def flat(value: int, height: int = 8, width: int = 8) -> np.ndarray:
    return np.full((height, width, 3), value, dtype=np.uint8)


class TestThreshold:
    def test_two_pixel_case(self):
        img = np.array([[[200, 200, 200], [50, 50, 50]]], dtype=np.uint8)
        result = simple_threshold_dither(img, 0.5)
        assert result[0, 0].tolist() == [255, 255, 255]
        assert result[0, 1].tolist() == [0, 0, 0]

    def test_comparison_is_strict(self):
        img = flat(0)
        assert np.all(simple_threshold_dither(img, 0.0) == 0)
        assert np.all(simple_threshold_dither(flat(255), 1.0) == 0)

    def test_per_channel_thresholds(self):
        img = flat(128, 1, 1)
        thresholds = np.array([[[0.1, 0.9, 0.5]]])
        assert threshold_dither(img, thresholds)[0, 0].tolist() == [255, 0, 255]


class TestOrdered:
    def test_bayer_two_by_two_on_midtone(self):
        result = bayer_dither(flat(128, 2, 2), 2)
        assert result[:, :, 0].tolist() == [[255, 255], [0, 255]]

    @pytest.mark.parametrize("size", [2, 4, 8, 16])
    def test_bayer_is_binary(self, size):
        ramp = np.tile(np.arange(0, 256, 4, dtype=np.uint8), (20, 1))
        img = np.stack([ramp] * 3, axis=2)
        result = bayer_dither(img, size)
        assert set(np.unique(result)) <= {0, 255}
        assert result.shape == img.shape

    def test_bayer_tracks_brightness(self):
        dark = bayer_dither(flat(64, 16, 16), 8).mean()
        light = bayer_dither(flat(192, 16, 16), 8).mean()
        assert dark < light

    def test_tile_matrix_scales_cells(self):
        tiled = tile_matrix(PATTERN_4x4, 8, 8, scale=2)
        assert np.all(tiled[0:2, 0:2] == PATTERN_4x4[0, 0])
        assert np.all(tiled[0:2, 2:4] == PATTERN_4x4[0, 1])
        assert np.all(tiled[2:4, 0:2] == PATTERN_4x4[1, 0])

    def test_tile_matrix_crops_to_image(self):
        tiled = tile_matrix(PATTERN_4x4, 5, 7)
        assert tiled.shape == (5, 7)
        assert tiled[4, 6] == PATTERN_4x4[0, 2]

    def test_pattern_scale_changes_output(self):
        img = flat(100, 8, 8)
        assert not np.array_equal(pattern_dither(img, 1), pattern_dither(img, 2))

    def test_clustered_dot_count(self):
        # Entries 0..8 of the tile sit below 128 / 255
        result = clustered_dot_dither(flat(128, 4, 4))
        assert (result[:, :, 0] == 255).sum() == 9

    def test_pattern_scale_larger_than_image(self):
        img = flat(100, 4, 4)
        tiled = tile_matrix(PATTERN_4x4, 4, 4, scale=50000)
        assert np.all(tiled == PATTERN_4x4[0, 0])
        # Cell (0, 0) has threshold 0, so every nonblack pixel lights up
        assert np.all(pattern_dither(img, 50000) == 255)

    def test_clustered_dot_grows_from_center(self):
        # 10 / 255 sits between tile entries 0/16 and 1/16
        result = clustered_dot_dither(flat(10, 4, 4))
        assert result[1, 1, 0] == 255
        assert (result[:, :, 0] == 255).sum() == 1


class TestNoise:
    def test_white_noise_uses_one_sample_per_pixel(self):
        img = flat(128, 3, 5)
        expected = Lcg(WHITE_NOISE_SEED).uniform(15).reshape(3, 5) * 0.8
        result = white_noise_dither(img, 0.8, Lcg(WHITE_NOISE_SEED))
        assert np.array_equal(result[:, :, 0], np.where(128 / 255.0 > expected, 255, 0))
        assert np.array_equal(result[:, :, 0], result[:, :, 1])
        assert np.array_equal(result[:, :, 1], result[:, :, 2])

    def test_random_threshold_channels_differ(self):
        result = random_threshold_dither(flat(128, 16, 16), 1.0, Lcg(99))
        assert not np.array_equal(result[:, :, 0], result[:, :, 1])

    def test_random_threshold_samples_interleaved_per_pixel(self):
        img = flat(128, 2, 2)
        samples = Lcg(5).uniform(12).reshape(2, 2, 3)
        result = random_threshold_dither(img, 1.0, Lcg(5))
        assert np.array_equal(result, np.where(128 / 255.0 > samples, 255, 0).astype(np.uint8))

    def test_blue_noise_deterministic(self):
        img = flat(100, 12, 12)
        a = blue_noise_dither(img, 0.5, Lcg(12345))
        b = blue_noise_dither(img, 0.5, Lcg(12345))
        assert np.array_equal(a, b)
        assert set(np.unique(a)) <= {0, 255}

    def test_zero_threshold_lights_every_nonblack_pixel(self):
        img = flat(1, 6, 6)
        assert np.all(white_noise_dither(img, 0.0, Lcg(1)) == 255)
        assert np.all(blue_noise_dither(img, 0.0, Lcg(1)) == 255)


class TestHalftone:
    def test_circle_dot_area_on_white(self):
        result = halftone_circle_dither(flat(255, 8, 8), 4)
        # 9 of 16 cell positions lie strictly inside the unit circle
        assert (result[:, :, 0] == 255).sum() == 36

    def test_circle_center_lit_first(self):
        result = halftone_circle_dither(flat(1, 4, 4), 4)
        assert result[2, 2, 0] == 255
        assert (result[:, :, 0] == 255).sum() == 1

    def test_diamond_dot_area_on_white(self):
        result = halftone_diamond_dither(flat(255, 4, 4), 4)
        assert (result[:, :, 0] == 255).sum() == 15
        assert result[0, 0, 0] == 0

    @pytest.mark.parametrize("dither", [halftone_circle_dither, halftone_diamond_dither])
    def test_scale_has_a_floor(self, dither):
        img = np.random.default_rng(3).integers(0, 256, (9, 9, 3), dtype=np.uint8)
        assert np.array_equal(dither(img, 1), dither(img, 4))

    def test_larger_cells(self):
        result = halftone_circle_dither(flat(255, 8, 8), 8)
        assert result[4, 4, 0] == 255
        assert result[0, 0, 0] == 0


class TestGradient:
    def test_edge_lowers_threshold(self):
        img = np.zeros((1, 6, 3), dtype=np.uint8)
        img[:, 3:, :] = 110
        result = gradient_based_dither(img, 0.5)
        assert result[0, :, 0].tolist() == [0, 0, 0, 255, 0, 0]

    def test_border_columns_have_no_gradient(self):
        img = np.zeros((2, 5, 3), dtype=np.uint8)
        img[:, ::2, :] = 255
        gradient = horizontal_gradient(img)
        assert np.all(gradient[:, 0] == 0)
        assert np.all(gradient[:, -1] == 0)

    def test_gradient_range(self):
        img = np.zeros((1, 3, 3), dtype=np.uint8)
        img[0, 2, :] = 255
        assert horizontal_gradient(img)[0, 1] == pytest.approx(1.0)

    def test_narrow_image(self):
        img = flat(200, 3, 2)
        assert np.all(horizontal_gradient(img) == 0)
        assert np.all(gradient_based_dither(img, 0.5) == 255)
