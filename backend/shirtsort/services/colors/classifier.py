"""
Optional classifier-based color override.

An image-classification capability may label a photo with something like
"red jersey"; when a label names a known color, that color takes precedence
over pixel analysis. The capability is slow to load and entirely optional:
any failure means "no opinion" and the caller falls back to pixel heuristics.
"""
from threading import Lock
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from loguru import logger
from PIL import Image

from shirtsort.config import Config, config as default_config
from shirtsort.errors import ClassifierInconclusive, ClassifierUnavailable
from shirtsort.models import NAMED_COLORS, ColorAnalysis, NamedColor

Classification = Tuple[str, float]
ClassifyFn = Callable[[Image.Image], Sequence[Classification]]
Loader = Callable[[], ClassifyFn]

# Label spellings that map onto a table entry under another name
COLOR_ALIASES: Dict[str, str] = {"grey": "Gray"}


def _color_tokens() -> List[Tuple[str, NamedColor]]:
    by_name = {entry.name: entry for entry in NAMED_COLORS}
    tokens = [(entry.name.lower(), entry) for entry in NAMED_COLORS]
    tokens.extend((alias, by_name[name]) for alias, name in COLOR_ALIASES.items())
    return tokens


COLOR_TOKENS = _color_tokens()


def match_color_label(classifications: Sequence[Classification]) -> Tuple[NamedColor, str]:
    """
    First known color name found in the labels, scanning in rank order.

    Returns:
        Tuple of (matched color, label it came from)

    Raises:
        ClassifierInconclusive: If no label mentions a known color
    """
    for label, _score in classifications:
        lowered = label.lower()
        for token, entry in COLOR_TOKENS:
            if token in lowered:
                return entry, label
    raise ClassifierInconclusive("No color-bearing label")


def top_score(classifications: Sequence[Classification], top_k: int = 3) -> float:
    """Highest score among the first ``top_k`` classifications, clamped to [0, 1]."""
    scores = [float(score) for _label, score in classifications[:top_k]]
    if not scores:
        return 0.0
    return min(1.0, max(0.0, max(scores)))


class ClassifierOverride:
    """Interface for the optional classifier capability."""

    available = False

    def override(self, image: Image.Image) -> Optional[ColorAnalysis]:
        """Label-derived color, or None to defer to pixel analysis."""
        raise NotImplementedError


class UnavailableClassifier(ClassifierOverride):
    """No classifier configured; never has an opinion."""

    def override(self, image: Image.Image) -> Optional[ColorAnalysis]:
        return None


class AvailableClassifier(ClassifierOverride):
    """
    Wraps a ``classify(image) -> [(label, score)]`` capability.

    The capability is built by ``loader`` on first use, at most once. A
    failed load disables the override for the lifetime of this object.
    """

    available = True

    def __init__(self, loader: Loader, top_k: int = 3):
        self._loader = loader
        self._classify: Optional[ClassifyFn] = None
        self._disabled = False
        self._lock = Lock()
        self.top_k = top_k

    @classmethod
    def from_callable(cls, classify: ClassifyFn, top_k: int = 3) -> "AvailableClassifier":
        """Wrap an already initialized capability."""
        return cls(loader=lambda: classify, top_k=top_k)

    @property
    def disabled(self) -> bool:
        return self._disabled

    def _ensure_loaded(self) -> ClassifyFn:
        with self._lock:
            if self._disabled:
                raise ClassifierUnavailable("Classifier disabled after failed initialization")
            if self._classify is None:
                logger.info("Initializing image classifier")
                try:
                    self._classify = self._loader()
                except Exception as e:
                    self._disabled = True
                    logger.warning(f"Classifier initialization failed, override disabled: {e}")
                    raise ClassifierUnavailable(str(e)) from e
                logger.info("Image classifier ready")
            return self._classify

    def classify(self, image: Image.Image) -> List[Classification]:
        """Run the capability; serialized so a shared handle is never used concurrently."""
        classify = self._ensure_loaded()
        with self._lock:
            return [(str(label), float(score)) for label, score in classify(image)]

    def override(self, image: Image.Image) -> Optional[ColorAnalysis]:
        try:
            classifications = self.classify(image)
            entry, label = match_color_label(classifications)
        except ClassifierUnavailable:
            return None
        except ClassifierInconclusive:
            logger.debug("Classifier labels carry no color, deferring to pixel analysis")
            return None
        except Exception as e:
            logger.warning(f"Classifier failed, deferring to pixel analysis: {e}")
            return None

        confidence = top_score(classifications, self.top_k)
        logger.info(f"Classifier override {entry.name} from label '{label}' (conf={confidence:.3f})")
        return ColorAnalysis(
            dominant_color=entry.rgb,
            color_name=entry.name,
            confidence=confidence,
            is_override=True
        )


def transformers_loader(model: str, device: Optional[str] = None) -> Loader:
    """
    Loader for a Hugging Face image-classification pipeline.

    ``transformers`` is imported only when the loader runs, so the package
    works without the optional ``classifier`` extra installed.
    """
    def load() -> ClassifyFn:
        try:
            from transformers import pipeline
        except ImportError as e:
            raise ClassifierUnavailable(
                "transformers not available. Install with: pip install 'shirtsort[classifier]'"
            ) from e

        kwargs: Dict[str, Any] = {"model": model}
        if device:
            kwargs["device"] = device
        classifier = pipeline("image-classification", **kwargs)

        def classify(image: Image.Image) -> List[Classification]:
            predictions = classifier(image.convert("RGB"))
            return [(p["label"], p["score"]) for p in predictions]

        return classify

    return load


def build_classifier(cfg: Config = None) -> ClassifierOverride:
    """Pick the classifier variant once, at startup."""
    cfg = cfg or default_config
    if not cfg.CLASSIFIER_ENABLED:
        return UnavailableClassifier()
    return AvailableClassifier(transformers_loader(cfg.CLASSIFIER_MODEL, cfg.CLASSIFIER_DEVICE))
