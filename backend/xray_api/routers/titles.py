"""Title parsing and sample submission endpoints."""
from fastapi import APIRouter, Depends

from ...watcher.models import ParsedTitle, RawTitleSample
from ...watcher.parser import TitleParser
from ..dependencies import get_dispatcher, get_parser
from ..schemas import LastSeenTitle, ParseRequest, SampleDispatchResponse
from ..services.dispatcher import TitleDispatcher

router = APIRouter(prefix="/titles", tags=["titles"])


@router.post("/parse", response_model=ParsedTitle)
def parse(request: ParseRequest, parser: TitleParser = Depends(get_parser)) -> ParsedTitle:
    """Classify a raw title without dispatching it."""

    return parser.parse(request.text)


@router.post("/samples", response_model=SampleDispatchResponse, status_code=202)
def submit_sample(
    sample: RawTitleSample,
    dispatcher: TitleDispatcher = Depends(get_dispatcher),
) -> SampleDispatchResponse:
    """Accept an observed title; new titles are queued for lookup."""

    dispatch = dispatcher.submit(sample)
    if dispatch is None:
        return SampleDispatchResponse(dispatched=False)
    return SampleDispatchResponse(dispatched=True, message=dispatch.message, job_id=dispatch.job_id)


@router.get("/last-seen", response_model=LastSeenTitle)
def last_seen(dispatcher: TitleDispatcher = Depends(get_dispatcher)) -> LastSeenTitle:
    """Return the raw title that most recently triggered a dispatch."""

    return dispatcher.last_seen
