"""
Greedy incremental color grouping.

Photos are visited once, in input order. Each joins the first existing group
(in creation order) whose representative color is within the threshold, not
the nearest one; otherwise it founds a new group. Encounter order therefore
decides group identity and membership.
"""
from typing import List, Sequence

from loguru import logger

from shirtsort.config import config
from shirtsort.models import Photo, PhotoGroup
from shirtsort.services.colors.utils import color_distance
from shirtsort.utils.ids import group_id, group_name


class GroupingEngine:
    """First-match-wins clustering of analyzed photos by color."""

    def __init__(self, threshold: float = None):
        self.threshold = config.GROUP_THRESHOLD if threshold is None else threshold
        if not config.validate_threshold(self.threshold):
            raise ValueError(f"Invalid grouping threshold: {self.threshold}")

    def group(self, photos: Sequence[Photo]) -> List[PhotoGroup]:
        """
        Cluster photos and return groups, largest first.

        Photos without an analysis are left out. Ties in size keep creation
        order.
        """
        groups: List[PhotoGroup] = []

        for photo in photos:
            if photo.analysis is None:
                logger.warning(f"Skipping photo {photo.id} without color analysis")
                continue

            color = photo.analysis.dominant_color
            target = None
            for group in groups:
                if color_distance(group.representative_color, color) < self.threshold:
                    target = group
                    break

            if target is None:
                index = len(groups)
                target = PhotoGroup(
                    id=group_id(index),
                    name=group_name(index),
                    representative_color=color
                )
                groups.append(target)
                logger.debug(f"Created {target.name} for color {photo.analysis.hex}")

            target.photos.append(photo)
            photo.group_id = target.id

        logger.info(f"Grouped {sum(g.size for g in groups)} photos into {len(groups)} groups")
        return sorted(groups, key=lambda g: -g.size)


def group_photos(photos: Sequence[Photo], threshold: float = None) -> List[PhotoGroup]:
    """Group photos with a one-off engine."""
    return GroupingEngine(threshold).group(photos)
