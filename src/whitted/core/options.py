"""Render options for the unified integrator.

One options structure covers both reference configurations:

    single_sample():   1 sample at the pixel center, gamma corrected,
                       ambient added to lit and shadowed points
    supersampled(16):  16 jittered samples averaged, no gamma,
                       ambient added to shadowed points only
"""

from __future__ import annotations

from dataclasses import dataclass

# Bounce bound used by both reference configurations
MAX_DEPTH = 100

DEFAULT_WIDTH = 512
DEFAULT_HEIGHT = 512
DEFAULT_GAMMA = 2.2


@dataclass
class RenderOptions:
    """Options controlling sampling, shading and post-processing.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        sample_count: Primary rays per pixel (>= 1). Their results are
            averaged.
        jitter_enabled: If True, each sample is offset by a uniform random
            sub-pixel jitter; otherwise every sample goes through the pixel
            center.
        gamma_correct: If True, gamma correction is applied to the final
            image before export.
        gamma: The gamma value used when gamma_correct is set.
        ambient_always_added: If True, the ambient term is added to lit
            points as well as shadowed ones.
        max_depth: Maximum number of bounce iterations per primary ray.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    sample_count: int = 1
    jitter_enabled: bool = False
    gamma_correct: bool = True
    gamma: float = DEFAULT_GAMMA
    ambient_always_added: bool = True
    max_depth: int = MAX_DEPTH

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check every option.

        Raises:
            ValueError: If any option is out of range.
        """
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) must be positive"
            )
        if self.sample_count < 1:
            raise ValueError(f"sample_count = {self.sample_count} must be at least 1")
        if self.gamma <= 0.0:
            raise ValueError(f"gamma = {self.gamma} must be positive")
        if self.max_depth < 1:
            raise ValueError(f"max_depth = {self.max_depth} must be at least 1")

    @classmethod
    def single_sample(
        cls, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT
    ) -> RenderOptions:
        """One ray through each pixel center with gamma correction."""
        return cls(
            width=width,
            height=height,
            sample_count=1,
            jitter_enabled=False,
            gamma_correct=True,
            ambient_always_added=True,
        )

    @classmethod
    def supersampled(
        cls,
        sample_count: int = 16,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
    ) -> RenderOptions:
        """Jittered supersampling without gamma correction."""
        return cls(
            width=width,
            height=height,
            sample_count=sample_count,
            jitter_enabled=True,
            gamma_correct=False,
            ambient_always_added=False,
        )
