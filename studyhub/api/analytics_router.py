"""API routes for grade and sentiment statistics."""

import logging

from fastapi import APIRouter

from studyhub.analytics.correlation import analyze_correlation, linear_regression
from studyhub.analytics.descriptive import descriptive_stats, kurtosis, skewness
from studyhub.analytics.trends import grade_trend, moving_average
from studyhub.api.schemas import (
    CorrelationResponse,
    DescriptiveStatsResponse,
    PairedSampleRequest,
    RegressionResponse,
    SampleRequest,
    TrendRequest,
    TrendResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.post("/describe", response_model=DescriptiveStatsResponse)
async def describe(request: SampleRequest) -> DescriptiveStatsResponse:
    """Summarize a numeric sample."""
    stats = descriptive_stats(request.values)
    return DescriptiveStatsResponse(
        count=stats.count,
        mean=stats.mean,
        median=stats.median,
        mode=stats.mode,
        std_dev=stats.std_dev,
        variance=stats.variance,
        min=stats.min,
        max=stats.max,
        range=stats.range,
        skewness=skewness(request.values),
        kurtosis=kurtosis(request.values),
    )


@router.post("/correlation", response_model=CorrelationResponse)
async def correlation(request: PairedSampleRequest) -> CorrelationResponse:
    """Correlate two index-aligned series."""
    result = analyze_correlation(request.x, request.y)
    logger.info("Correlation over %d points: r=%.3f", result.n, result.r)
    return CorrelationResponse(
        r=result.r,
        n=result.n,
        t_statistic=result.t_statistic,
        p_value=result.p_value,
        significance=result.significance,
        strength=result.strength,
        direction=result.direction,
        description=result.description,
    )


@router.post("/regression", response_model=RegressionResponse)
async def regression(request: PairedSampleRequest) -> RegressionResponse:
    """Fit a least-squares line through the pairs."""
    result = linear_regression(request.x, request.y)
    return RegressionResponse(
        slope=result.slope,
        intercept=result.intercept,
        r_squared=result.r_squared,
        predictions=result.predictions,
    )


@router.post("/trend", response_model=TrendResponse)
async def trend(request: TrendRequest) -> TrendResponse:
    """Classify a grade history and smooth it."""
    result = grade_trend(request.values)
    return TrendResponse(
        direction=result.direction,
        slope=result.slope,
        strength=result.strength,
        moving_average=moving_average(request.values, request.window),
    )
