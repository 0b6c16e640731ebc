from spotrate.domain.entities import (
    AggregateStream,
    Rating,
    Review,
    ReviewStatistics,
    Spot,
    SpotAggregate,
    User,
)

__all__ = ["AggregateStream", "Rating", "Review", "ReviewStatistics", "Spot", "SpotAggregate", "User"]
