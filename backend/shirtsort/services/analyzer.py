"""
Per-photo color analysis.

Tries the classifier override first, then pixel heuristics, and absorbs every
failure into the neutral default so a batch always completes.
"""
import time
from typing import Callable, List, Optional, Sequence

from shirtsort.errors import DecodeFailure
from shirtsort.models import ColorAnalysis
from shirtsort.services.colors.classifier import ClassifierOverride, UnavailableClassifier
from shirtsort.services.colors.extraction import DominantColorExtractor
from shirtsort.services.imaging import open_image
from shirtsort.utils.logging import get_logger
from shirtsort.utils.metrics import get_metrics

ProgressCallback = Callable[[int, int, ColorAnalysis], None]


class PhotoColorAnalyzer:
    """Turns raw image bytes into exactly one ColorAnalysis."""

    def __init__(self,
                 classifier: Optional[ClassifierOverride] = None,
                 extractor: Optional[DominantColorExtractor] = None):
        self.classifier = classifier or UnavailableClassifier()
        self.extractor = extractor or DominantColorExtractor()

    def analyze(self, data: bytes) -> ColorAnalysis:
        """
        Analyze one photo. Never raises.

        Args:
            data: Raw image bytes in any format Pillow can decode

        Returns:
            Classifier override, pixel analysis, or the default gray analysis
        """
        logger = get_logger()
        metrics = get_metrics()
        start_time = time.time()

        try:
            with open_image(data) as image:
                analysis = self.classifier.override(image)
                source = "override"
                if analysis is None:
                    analysis = self.extractor.extract(image)
                    source = "pixels"
        except DecodeFailure as e:
            logger.warning(f"Photo could not be decoded, using default color: {e}")
            metrics.increment_failure_count("decode")
            analysis, source = ColorAnalysis.default(), "default"
        except Exception as e:
            logger.error(f"Color analysis failed, using default color: {e}")
            metrics.increment_failure_count("analysis")
            analysis, source = ColorAnalysis.default(), "default"

        duration_ms = (time.time() - start_time) * 1000
        metrics.record_timing("photo_analysis", duration_ms)
        metrics.increment_analysis_count(source)
        metrics.record_confidence(analysis.confidence)

        logger.debug(
            f"Analyzed photo: {analysis.color_name} {analysis.hex}",
            extra={"source": source, "confidence": round(analysis.confidence, 3),
                   "ms": round(duration_ms, 1)}
        )
        return analysis

    def analyze_all(self, images: Sequence[bytes],
                    on_progress: Optional[ProgressCallback] = None) -> List[ColorAnalysis]:
        """
        Analyze photos one at a time in input order.

        Args:
            images: Raw image bytes per photo
            on_progress: Called as ``on_progress(done, total, analysis)`` after each photo

        Returns:
            One analysis per input, same order
        """
        total = len(images)
        analyses = []
        for index, data in enumerate(images):
            analysis = self.analyze(data)
            analyses.append(analysis)
            if on_progress is not None:
                on_progress(index + 1, total, analysis)
        return analyses
