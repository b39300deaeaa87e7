"""Taichi implementation of a classic Whitted-style sphere ray tracer.

This package renders static sphere scenes by following each primary ray
through mirror and glass bounces until it lands on a diffuse surface, which
is then shaded with shadow-tested direct lighting from a directional light.

Subpackages:
    core: Ray/vector laws, render options, the bounce-loop integrator and renderer
    geometry: Sphere primitive and ray-sphere intersection
    materials: Diffuse direct lighting, mirror reflection, glass refraction
    scene: Sphere storage, nearest-hit queries, lighting and reference scenes
    camera: Pinhole camera ray generation
    preview: Gamma correction, display and image export
"""

__version__ = "0.1.0"
