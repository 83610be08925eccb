import numpy as np
import pytest

from pixeldither.constants import ERROR_DIFFUSION_KERNELS, FLOYD_STEINBERG_KERNEL
from pixeldither.processing.dither import error_diffusion as error_diffusion_module
from pixeldither.processing.dither.error_diffusion import error_diffusion_dither, validate_kernel, validate_kernels
from pixeldither.processing.quantize import quantization_levels, quantize_channel


def gradient_image(height: int = 12, width: int = 40) -> np.ndarray:
    ramp = np.linspace(0, 255, width).astype(np.uint8)
    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[:, :, 0] = ramp
    img[:, :, 1] = ramp[::-1]
    img[:, :, 2] = 128
    return img


class TestKernels:
    @pytest.mark.parametrize("name", sorted(ERROR_DIFFUSION_KERNELS))
    def test_weight_sum(self, name):
        total = sum(w for _, _, w in ERROR_DIFFUSION_KERNELS[name])
        expected = 0.75 if name == 'atkinson' else 1.0
        assert total == pytest.approx(expected, abs=1e-6)

    @pytest.mark.parametrize("name", sorted(ERROR_DIFFUSION_KERNELS))
    def test_only_reaches_unvisited_pixels(self, name):
        for dx, dy, _ in ERROR_DIFFUSION_KERNELS[name]:
            assert dy > 0 or (dy == 0 and dx > 0)

    def test_ten_kernels(self):
        assert len(ERROR_DIFFUSION_KERNELS) == 10

    def test_rejects_backward_offset(self):
        with pytest.raises(ValueError):
            validate_kernel(((-1, 0, 0.5),))

    def test_rejects_self_offset(self):
        with pytest.raises(ValueError):
            validate_kernel(((0, 0, 1.0),))

    def test_rejects_upward_offset(self):
        with pytest.raises(ValueError):
            validate_kernel(((1, -1, 0.5),))

    def test_rejects_overweight_kernel(self):
        with pytest.raises(ValueError):
            validate_kernel(((1, 0, 0.75), (0, 1, 0.5)))

    def test_rejects_empty_kernel(self):
        with pytest.raises(ValueError):
            validate_kernel(())

    def test_named_validation_reports_kernel(self):
        with pytest.raises(ValueError, match="broken"):
            validate_kernels({"floyd-steinberg": FLOYD_STEINBERG_KERNEL, "broken": ((0, 0, 1.0),)})

    def test_import_time_check_leaves_no_globals(self):
        assert not hasattr(error_diffusion_module, "_name")
        assert not hasattr(error_diffusion_module, "_kernel")


class TestErrorDiffusion:
    def test_white_stays_white(self):
        img = np.full((2, 2, 3), 255, dtype=np.uint8)
        result = error_diffusion_dither(img, FLOYD_STEINBERG_KERNEL, colors=2, error_diffusion=1.0, serpentine=True)
        assert np.all(result == 255)

    def test_black_stays_black(self):
        img = np.zeros((5, 7, 3), dtype=np.uint8)
        result = error_diffusion_dither(img, FLOYD_STEINBERG_KERNEL)
        assert np.all(result == 0)

    @pytest.mark.parametrize("name", sorted(ERROR_DIFFUSION_KERNELS))
    @pytest.mark.parametrize("colors", [2, 3, 4, 8])
    def test_output_on_quantization_levels(self, name, colors):
        img = gradient_image()
        result = error_diffusion_dither(img, ERROR_DIFFUSION_KERNELS[name], colors=colors)
        assert result.shape == img.shape
        assert result.dtype == np.uint8
        assert set(np.unique(result)) <= set(quantization_levels(colors))

    def test_input_not_modified(self):
        img = gradient_image()
        original = img.copy()
        error_diffusion_dither(img, FLOYD_STEINBERG_KERNEL)
        assert np.array_equal(img, original)

    def test_error_carries_to_next_pixel(self):
        # 100/255 quantizes to black; 7/16 of its residual pushes the next pixel over 0.5
        img = np.full((1, 2, 3), 100, dtype=np.uint8)
        result = error_diffusion_dither(img, FLOYD_STEINBERG_KERNEL, colors=2, error_diffusion=1.0)
        assert result[0, 0].tolist() == [0, 0, 0]
        assert result[0, 1].tolist() == [255, 255, 255]

    def test_strength_scales_error(self):
        img = np.full((1, 2, 3), 100, dtype=np.uint8)
        result = error_diffusion_dither(img, FLOYD_STEINBERG_KERNEL, colors=2, error_diffusion=0.5)
        assert np.all(result == 0)

    def test_zero_strength_is_plain_quantization(self):
        img = gradient_image()
        result = error_diffusion_dither(img, FLOYD_STEINBERG_KERNEL, colors=4, error_diffusion=0.0)
        expected = np.vectorize(lambda v: quantize_channel(v / 255.0, 4))(img)
        assert np.array_equal(result, expected)

    def test_serpentine_mirrors_odd_rows(self):
        img = np.zeros((2, 2, 3), dtype=np.uint8)
        img[1, :, :] = 100

        forward = error_diffusion_dither(img, FLOYD_STEINBERG_KERNEL, serpentine=False)
        assert forward[1, :, 0].tolist() == [0, 255]

        serpentine = error_diffusion_dither(img, FLOYD_STEINBERG_KERNEL, serpentine=True)
        assert serpentine[1, :, 0].tolist() == [255, 0]

    def test_mean_preservation(self):
        img = np.full((32, 32, 3), 128, dtype=np.uint8)
        result = error_diffusion_dither(img, FLOYD_STEINBERG_KERNEL, colors=2)
        assert abs(result.mean() - 128) < 20

    def test_atkinson_midtone_is_binary(self):
        # Atkinson drops 2/8 of every residual
        img = np.full((16, 16, 3), 128, dtype=np.uint8)
        result = error_diffusion_dither(img, ERROR_DIFFUSION_KERNELS['atkinson'], colors=2)
        assert set(np.unique(result)) <= {0, 255}

    def test_channels_dithered_independently(self):
        img = np.zeros((4, 4, 3), dtype=np.uint8)
        img[:, :, 0] = 255
        result = error_diffusion_dither(img, FLOYD_STEINBERG_KERNEL)
        assert np.all(result[:, :, 0] == 255)
        assert np.all(result[:, :, 1:] == 0)
