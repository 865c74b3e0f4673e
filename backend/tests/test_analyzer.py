"""
Tests for per-photo analysis and batch analysis:
- classifier override precedence
- pixel fallback
- default analysis on every failure
"""
import pytest

from shirtsort.models import ColorAnalysis
from shirtsort.services.analyzer import PhotoColorAnalyzer
from shirtsort.services.colors.classifier import AvailableClassifier
from shirtsort.services.colors.extraction import DominantColorExtractor
from shirtsort.services.pipeline import analyze_all
from shirtsort.utils.metrics import get_metrics

from conftest import BLUE, RED

DEFAULT = ColorAnalysis(dominant_color=(128, 128, 128), color_name="Gray", confidence=0.5, is_override=False)


class ExplodingExtractor(DominantColorExtractor):
    def extract(self, image):
        raise RuntimeError("unexpected failure")


class TestAnalyze:
    """Test PhotoColorAnalyzer.analyze"""

    def test_pixel_path(self, shirt_image_bytes):
        analysis = PhotoColorAnalyzer().analyze(shirt_image_bytes(RED))

        assert analysis.dominant_color == RED
        assert analysis.color_name == "Red"
        assert analysis.is_override is False

    def test_jpeg_input(self, solid_image_bytes):
        analysis = PhotoColorAnalyzer().analyze(solid_image_bytes(RED, fmt="JPEG", quality=95))
        assert analysis.dominant_color == RED

    @pytest.mark.parametrize("data", [b"", b"not an image", b"\x89PNG\r\n\x1a\n truncated"])
    def test_undecodable_gives_default(self, data):
        assert PhotoColorAnalyzer().analyze(data) == DEFAULT

    def test_default_values(self):
        default = ColorAnalysis.default()
        assert default == DEFAULT
        assert default.hex == "#808080"

    def test_override_takes_precedence(self, shirt_image_bytes):
        classifier = AvailableClassifier.from_callable(lambda img: [("blue jersey", 0.8)])
        analysis = PhotoColorAnalyzer(classifier=classifier).analyze(shirt_image_bytes(RED))

        assert analysis.is_override is True
        assert analysis.color_name == "Blue"
        assert analysis.confidence == pytest.approx(0.8)

    def test_inconclusive_override_falls_back_to_pixels(self, shirt_image_bytes):
        classifier = AvailableClassifier.from_callable(lambda img: [("jersey", 0.8)])
        analysis = PhotoColorAnalyzer(classifier=classifier).analyze(shirt_image_bytes(RED))

        assert analysis.is_override is False
        assert analysis.dominant_color == RED

    def test_failing_classifier_falls_back_to_pixels(self, shirt_image_bytes):
        def broken(img):
            raise RuntimeError("gpu lost")

        analysis = PhotoColorAnalyzer(classifier=AvailableClassifier.from_callable(broken)).analyze(
            shirt_image_bytes(BLUE)
        )
        assert analysis.dominant_color == BLUE

    def test_unexpected_extractor_failure_gives_default(self, shirt_image_bytes):
        analyzer = PhotoColorAnalyzer(extractor=ExplodingExtractor())
        assert analyzer.analyze(shirt_image_bytes(RED)) == DEFAULT

    def test_confidence_in_range(self, shirt_image_bytes, solid_image_bytes):
        analyzer = PhotoColorAnalyzer()
        inputs = [
            shirt_image_bytes(RED),
            solid_image_bytes((0, 0, 0)),
            solid_image_bytes((255, 0, 0, 0)),
            b"garbage",
        ]
        for data in inputs:
            analysis = analyzer.analyze(data)
            assert 0.0 <= analysis.confidence <= 1.0

    def test_records_metrics(self, shirt_image_bytes):
        analyzer = PhotoColorAnalyzer()
        analyzer.analyze(shirt_image_bytes(RED))
        analyzer.analyze(b"garbage")

        counters = get_metrics().get_counters()
        assert counters["photos_analyzed_total"] == 2
        assert counters["analysis_source_total_pixels"] == 1
        assert counters["analysis_source_total_default"] == 1
        assert counters["analysis_recovered_total_decode"] == 1


class TestAnalyzeAll:
    """Test batch analysis"""

    def test_one_per_input_in_order(self, shirt_image_bytes):
        images = [shirt_image_bytes(RED), b"broken", shirt_image_bytes(BLUE)]
        analyses = analyze_all(images)

        assert len(analyses) == 3
        assert analyses[0].dominant_color == RED
        assert analyses[1] == DEFAULT
        assert analyses[2].dominant_color == BLUE

    def test_progress_callback(self, shirt_image_bytes):
        seen = []
        images = [shirt_image_bytes(RED), shirt_image_bytes(BLUE), b"broken"]

        analyze_all(images, on_progress=lambda done, total, a: seen.append((done, total, a.color_name)))

        assert seen == [(1, 3, "Red"), (2, 3, "Blue"), (3, 3, "Gray")]

    def test_empty_batch(self):
        assert analyze_all([]) == []

    def test_idempotent(self, shirt_image_bytes):
        images = [shirt_image_bytes(RED), shirt_image_bytes(BLUE), shirt_image_bytes((32, 160, 48))]
        assert analyze_all(images) == analyze_all(images)
