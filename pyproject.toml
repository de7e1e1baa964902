[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "raydarts"
version = "0.1.0"
description = "Ray tracing building blocks: transforms, a camera, Monte Carlo sampling, example scenes and image tools"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "pillow",
]
keywords = ["ray tracing", "rendering", "monte carlo", "sampling", "graphics", "images"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
img-avg = "raydarts.img_avg:main"
img-compare = "raydarts.img_compare:main"

[tool.hatch.build.targets.wheel]
packages = ["raydarts"]

[tool.pytest.ini_options]
addopts = "-ra"
