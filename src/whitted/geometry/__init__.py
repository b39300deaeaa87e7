"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with robust ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) so the per-pixel
kernel can test every sphere in parallel across pixels. The same routine
serves both nearest-hit queries and shadow (any-hit) queries.
"""

from .sphere import HitRecord, Sphere, hit_sphere, sphere_roots

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "sphere_roots",
]
