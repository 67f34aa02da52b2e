"""Plant image classification backed by a training corpus.

No model is actually trained or run. The corpus only biases which plant
an image is attributed to, and "training" is a timed progress counter.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import asdict, dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from agrobot.config import Config
from agrobot.errors import TrainingPrecondition
from agrobot.localization import (
    DISEASE_TRANSLATIONS,
    HEALTH_STATES,
    HEALTH_TRANSLATIONS,
    PLANT_DISEASES,
    PLANT_TRANSLATIONS,
    RECOMMENDATION_TRANSLATIONS,
    RECOMMENDATIONS_BY_HEALTH,
    SEVERE_HEALTH_STATES,
    SUPPORTED_PLANTS,
    TRAINING_IN_PROGRESS,
    TRAINING_TOO_FEW_IMAGES,
    normalize_language,
    pick,
    translate,
)

logger = logging.getLogger("classification")

PROGRESS_STEP = 10
MIN_CONFIDENCE = 0.7
CONFIDENCE_SPAN = 0.25


@dataclass
class PlantClassificationResult:
    """Outcome of classifying one plant photo.

    Attributes:
        plant_type: Plant name, localized.
        confidence: Value in [0.70, 0.95).
        health_status: One of the four health levels, localized.
        possible_diseases: Up to two diseases; only set for the two most severe levels.
        recommendations: One to three localized care tips.
        image_url: Echo of the classified image reference, when one was given.
        training_suggested: True while the engine is untrained.
    """

    plant_type: str
    confidence: float
    health_status: str
    possible_diseases: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    image_url: Optional[str] = None
    training_suggested: bool = False

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


class ClassificationEngine:
    """Owns the training corpus, the trained flag and the progress counter."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        supported_plants: Sequence[str] = SUPPORTED_PLANTS,
        min_training_images: Optional[int] = None,
        tick_seconds: Optional[float] = None,
        analysis_delay: Optional[float] = None,
    ) -> None:
        self._rng = rng or random.Random()
        self.supported_plants = tuple(supported_plants)
        self.min_training_images = (
            Config.min_training_images if min_training_images is None else min_training_images
        )
        self.tick_seconds = Config.training_tick_seconds if tick_seconds is None else tick_seconds
        self.analysis_delay = Config.analysis_delay if analysis_delay is None else analysis_delay

        self._corpus: Dict[str, List[str]] = {plant: [] for plant in self.supported_plants}
        self._trained = False
        self._progress = 0
        self._training = False
        self._task: Optional[asyncio.Task] = None
        self._listeners: List[Callable[[int], object]] = []

    # ----------------------------
    # Corpus
    # ----------------------------

    def add_training_image(self, plant_type: str, image_ref: str) -> bool:
        if plant_type not in self._corpus:
            logger.warning("Plant type %s not supported", plant_type)
            return False
        if not image_ref:
            logger.warning("Empty image reference for %s ignored", plant_type)
            return False

        images = self._corpus[plant_type]
        images.append(image_ref)
        self._trained = False
        logger.info("Added training image for %s. Total: %d", plant_type, len(images))
        return True

    def total_images(self) -> int:
        return sum(len(images) for images in self._corpus.values())

    def get_training_stats(self) -> Dict[str, int]:
        return {plant: len(images) for plant, images in self._corpus.items()}

    # ----------------------------
    # Training
    # ----------------------------

    def get_training_progress(self) -> int:
        return self._progress

    def is_model_trained(self) -> bool:
        return self._trained

    def is_training(self) -> bool:
        return self._training

    def subscribe(self, callback: Callable[[int], object]) -> Callable[[], None]:
        """Call `callback(progress)` on every training tick; returns an unsubscribe function."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def check_training_preconditions(self, language: str = "en") -> None:
        if self._training:
            raise TrainingPrecondition(pick(TRAINING_IN_PROGRESS, language))
        if self.total_images() < self.min_training_images:
            raise TrainingPrecondition(
                pick(TRAINING_TOO_FEW_IMAGES, language).format(minimum=self.min_training_images)
            )

    async def train_model(self) -> bool:
        try:
            self.check_training_preconditions()
        except TrainingPrecondition as exc:
            logger.error("Training not started: %s", exc)
            return False

        self._training = True
        return await self._run_training()

    def start_training(self) -> Optional[asyncio.Task]:
        """Run training as an engine-owned task, or return None if it cannot start."""
        try:
            self.check_training_preconditions()
        except TrainingPrecondition as exc:
            logger.error("Training not started: %s", exc)
            return None

        # Claimed before the task first runs so a second start is rejected.
        self._training = True
        self._task = asyncio.get_running_loop().create_task(self._run_training())
        return self._task

    async def _run_training(self) -> bool:
        self._progress = 0
        try:
            while self._progress < 100:
                await asyncio.sleep(self.tick_seconds)
                self._progress += PROGRESS_STEP
                logger.info("Training progress: %d%%", self._progress)
                self._notify(self._progress)
        finally:
            self._training = False

        self._trained = True
        logger.info("Model training completed on %d images", self.total_images())
        return True

    def cancel_training(self) -> bool:
        if self._task is None or self._task.done():
            return False
        self._task.cancel()
        return True

    def _notify(self, progress: int) -> None:
        for callback in list(self._listeners):
            try:
                callback(progress)
            except Exception:
                logger.exception("Training progress listener failed")

    # ----------------------------
    # Inference
    # ----------------------------

    def select_plant(self) -> str:
        if not self._trained:
            return self._rng.choice(self.supported_plants)

        # +1 keeps plants without training images reachable.
        weights = [len(self._corpus[plant]) + 1 for plant in self.supported_plants]
        return self._rng.choices(self.supported_plants, weights=weights, k=1)[0]

    async def classify_plant_image(self, image_ref: Optional[str] = None,
                                   language: str = "en") -> PlantClassificationResult:
        if self._trained and self.analysis_delay > 0:
            await asyncio.sleep(self.analysis_delay)

        plant_type = self.select_plant()
        result = self._build_result(plant_type, language, image_ref)
        logger.info(
            "[classify] plant=%s health=%s confidence=%.2f trained=%s",
            plant_type,
            result.health_status,
            result.confidence,
            self._trained,
        )
        return result

    def _build_result(self, plant_type: str, language: str,
                      image_ref: Optional[str]) -> PlantClassificationResult:
        language = normalize_language(language)
        confidence = MIN_CONFIDENCE + self._rng.random() * CONFIDENCE_SPAN
        health_status = self._rng.choice(HEALTH_STATES)

        diseases: List[str] = []
        candidates = PLANT_DISEASES.get(plant_type, ())
        if health_status in SEVERE_HEALTH_STATES and candidates:
            count = min(1 + self._rng.randrange(2), len(candidates))
            diseases = self._rng.sample(list(candidates), count)

        recommendations = RECOMMENDATIONS_BY_HEALTH[health_status]

        return PlantClassificationResult(
            plant_type=translate(PLANT_TRANSLATIONS, plant_type, language),
            confidence=confidence,
            health_status=translate(HEALTH_TRANSLATIONS, health_status, language),
            possible_diseases=[translate(DISEASE_TRANSLATIONS, d, language) for d in diseases],
            recommendations=[translate(RECOMMENDATION_TRANSLATIONS, r, language) for r in recommendations],
            image_url=image_ref,
            training_suggested=not self._trained,
        )
