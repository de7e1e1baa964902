# raydarts

Building blocks for a small educational ray tracer, and two command-line
tools for working with rendered images.

## Installation

```
pip install .
```

## Modules

- `raydarts.transform`
  - `Ray(o, d, mint=1e-4, maxt=inf)` with `Ray.at(t)`.
  - `Transform(m=None, m_inv=None)`: a 4x4 homogeneous matrix and its inverse
    (computed when not given). `vector`, `point` and `normal` (inverse
    transpose, normalized) transform 3-vectors; `ray` transforms a ray and
    keeps its `mint`/`maxt`; `inverse()` and `*` (composition).
    `Transform.translate(t)` and `Transform.axis_offset(x, y, z, o)` build
    common transforms.
- `raydarts.camera`
  - `Camera(j)` takes a dict with `vfov` (degrees, default 90),
    `resolution` (default `[512, 512]`), `fdist` (default 1), `aperture`
    (lens radius, default 0) and `transform`. The transform may be a
    `Transform`, a 4x4 matrix, or a dict with `from`/`to` (or `at`)/`up`
    (look-at), `o`/`x`/`y`/`z` (axes and origin) or `translate`.
  - `Camera.generate_ray(pixel)` returns a world-space ray through a pixel
    position in `[0, resolution]`; with a non-zero aperture the origin is
    jittered over the lens.
- `raydarts.sampling`
  - `Pcg32` (PCG32 generator: `seed`, `next_uint`, `next_float`).
  - A per-thread global generator: `seed`, `randf`, `rand_range`, `randi`,
    `rand_vec3`, `rand_unit_vec3`, `random_in_unit_sphere`,
    `random_in_unit_disk`, and `hash2d` for hashing pixel coordinates.
  - Warping functions with their densities: `sample_disk`,
    `sample_sphere`, `sample_hemisphere`, `sample_hemisphere_cosine`,
    `sample_hemisphere_cosine_power`, `sample_sphere_cap`,
    `sample_triangle`, each with a matching `*_pdf` function.
  - Correlated multi-jittered samples: `cmj`, `cmj_grid`, `cmj_permute`,
    `cmj_randfloat`.
  - Tabulated distributions: `Distribution1D(values)` with
    `sample_continuous(u) -> (x, pdf, offset)`,
    `sample_discrete(u) -> (index, pmf, u_remapped)`, `discrete_pdf` and
    `count`; `Distribution2D(rows)` with
    `sample_continuous(u) -> (point, pdf)` and `pdf(p)`.
- `raydarts.optics`: `reflect(v, n)` and the `ScatterRecord` dataclass
  (`attenuation`, `wo`, `is_specular`).
- `raydarts.example_scenes`: four built-in scene descriptions as plain
  dicts: `create_sphere_scene`, `create_sphere_plane_scene`,
  `create_steinbach_scene`, `create_shirley_scene`, or
  `create_example_scene(n)` for `n` in 0..3 (other numbers raise
  `DartsError`).
- `raydarts.image`
  - `load_image(filename, raw=False)` returns a float32 array of shape
    `(height, width, 3)`. Files Pillow can open are converted from sRGB to
    linear unless `raw` is true; Radiance `.hdr` files and uncompressed
    scanline OpenEXR files are read as linear values.
  - `save_image(filename, image, gain=1.0)` writes a `(height, width, 3|4)`
    array, choosing the format from the extension (`savable_formats()`:
    bmp, exr, hdr, jpeg, jpg, png, tga). 8-bit formats are scaled by
    `gain`, sRGB-encoded and clamped, with non-finite colors written as
    magenta; `.exr` is written uncompressed with half-float channels.
  - `to_srgb` and `to_linear_rgb` convert color values.
- `raydarts.img_avg`: `average_images(filenames)`.
- `raydarts.img_compare`: `compare_images(test, reference, multiplier=1.0)`
  returns the scaled absolute difference image, the per-channel mean
  absolute difference and its channel average.
- `raydarts.common`: `DartsError`, `time_string(ms)`, `indent(text, amount)`
  (indents every line after the first) and `darts_init(verbosity)`, which
  sets up the `raydarts` logger to print plain messages to standard output.

## Example

```python
from raydarts.camera import Camera

camera = Camera({"vfov": 90.0, "resolution": [200, 100], "fdist": 1.0})
ray = camera.generate_ray((100.5, 50.5))
print(ray.o, ray.d)
```

## Command-line tools

Average several images of the same size; with `-o` the result is written
to a file:

```
img-avg -o average.png render1.png render2.png render3.png
```

Compare a test image with a reference. The exit status is 1 when the mean
absolute difference, averaged over the color channels, exceeds the threshold
(default 2/255) or an image cannot be read; `-o` writes the difference image
scaled by `-m`:

```
img-compare -o diff.png -m 10 -t 0.01 test.png reference.png
```

Both accept `-v/--verbosity` from 0 (trace) to 6 (off); the default is 2 (info).

## What this package does not do

There is no renderer here: no surfaces or intersection routines, no
materials beyond `reflect` and `ScatterRecord`, no integrators and no command
that turns a scene description into an image. The example scenes are data
only. Image reading does not handle compressed or tiled OpenEXR files.

## Tests

```
pip install .[test]
pytest
```