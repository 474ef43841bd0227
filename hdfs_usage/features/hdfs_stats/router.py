"""HDFS usage stats endpoints."""

import asyncio
import time
from functools import partial
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from loguru import logger

from hdfs_usage.common.exceptions import InvalidInputError, MalformedKeyError, StoreUnavailableError
from hdfs_usage.features.hdfs_stats.schemas import HdfsStatsResponse
from hdfs_usage.features.hdfs_stats.service import StatsQueryService

router = APIRouter(prefix="/hdfs", tags=["hdfs"])


def get_stats_service(request: Request) -> StatsQueryService:
    """Stats service created in the app lifespan."""
    service = getattr(request.app.state, "stats_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="HDFS stats store is not initialized",
        )
    return service


StatsService = Annotated[StatsQueryService, Depends(get_stats_service)]


@router.get(
    "/{cluster}",
    response_model=list[HdfsStatsResponse],
    response_model_exclude_none=True,
)
async def list_hdfs_stats(
    cluster: str,
    service: StatsService,
    path: Annotated[str, Query(description="Path prefix; empty matches all paths")] = "",
    limit: Annotated[int, Query(ge=1, le=10000, description="Maximum records")] = 100,
    attime: Annotated[
        int | None, Query(ge=0, description="Reference time, epoch seconds (default: now)")
    ] = None,
) -> list[HdfsStatsResponse]:
    """Usage stats for paths under ``path`` on ``cluster`` for the hour containing ``attime``."""
    reference_time = attime if attime is not None else int(time.time())

    loop = asyncio.get_running_loop()
    try:
        records = await loop.run_in_executor(
            None, partial(service.list_by_prefix, cluster, path, limit, reference_time)
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreUnavailableError as e:
        logger.error(f"HDFS stats store unavailable: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except MalformedKeyError as e:
        logger.error(f"Corrupt row key in HDFS usage table: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Stored statistics could not be decoded",
        )

    return [HdfsStatsResponse.from_record(record) for record in records]
