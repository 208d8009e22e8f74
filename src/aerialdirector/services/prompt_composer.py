"""Director prompt composition from a reference photo."""

from __future__ import annotations

from aerialdirector.backends.protocols import GenerativeBackend
from aerialdirector.observability.logging import get_logger
from aerialdirector.workflows.state import ImageReference

logger = get_logger(__name__)

__all__ = [
    "CINEMATOGRAPHY_RULES",
    "DEFAULT_DIRECTOR_MODEL",
    "FALLBACK_DIRECTOR_PROMPT",
    "PromptComposer",
]

DEFAULT_DIRECTOR_MODEL = "gemini-3-flash-preview"

FALLBACK_DIRECTOR_PROMPT = "A professional cinematic drone shot of the scene."

# Sampling leans deterministic so the same photo yields a similar shot list.
TEMPERATURE = 0.7
TOP_P = 0.95
TOP_K = 40

CINEMATOGRAPHY_RULES = """
You are a senior aerial cinematographer and commercial drone director.
Analyze the provided image and generate a professional, ultra-realistic drone-shot video description.

VIDEO FORMAT: Aspect Ratio 9:16 (vertical), Duration 6-8s, Real-world commercial drone footage.
CAMERA BEHAVIOR: Mounted on professional drone gimbal, smooth stabilized motion, realistic physics (acceleration/deceleration), natural yaw/tilt/roll, accurate parallax.
DRONE SEQUENCE:
1. Begin with wide aerial establishing shot matching reference.
2. Slowly move forward while gently descending.
3. Perform a smooth cinematic orbit or lateral pass.
4. Finish with a controlled push-in or upward pull-away.
ENVIRONMENT LOCK: Use ONLY visible elements. Do NOT hallucinate. Exact spatial layout, scale, perspective, weather, and shadows.
LIGHTING: Match reference exactly. Natural cinematic contrast.
LENS: 24-28mm aerial equivalent.

OUTPUT: Return ONLY a clean, detailed, single cohesive cinematic description suitable for Google Veo.
"""


class PromptComposer:
    """Ask the hosted text/vision model for a director prompt."""

    def __init__(self, backend: GenerativeBackend, *, model: str = DEFAULT_DIRECTOR_MODEL) -> None:
        self.backend = backend
        self.model = model

    async def compose(self, image: ImageReference) -> str:
        """Return a director prompt for `image`.

        Never returns an empty string: an empty or missing model answer is
        replaced by FALLBACK_DIRECTOR_PROMPT. Backend errors propagate.
        """
        image.validate()

        text = await self.backend.generate_content(
            model=self.model,
            image=image,
            system_instruction=CINEMATOGRAPHY_RULES,
            temperature=TEMPERATURE,
            top_p=TOP_P,
            top_k=TOP_K,
        )
        prompt = (text or "").strip()
        if not prompt:
            logger.warning("director_prompt_fallback", model=self.model)
            return FALLBACK_DIRECTOR_PROMPT

        logger.info("director_prompt_composed", model=self.model, chars=len(prompt))
        return prompt
