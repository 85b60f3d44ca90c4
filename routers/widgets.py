from fastapi import APIRouter, HTTPException, Depends, Query, Request, Response, status
from typing import Optional

from models.widget import Widget, WidgetCreate, WidgetUpdate
from services.tree import to_uber
from services.widgets import WidgetStore, get_widget_store
from utils.etag import handle_conditional_request, set_etag_headers
from utils.hateoas import hateoas_widget, hateoas_widgets
from utils.responses import UberResponse


router = APIRouter(
    prefix="/widgets",
    tags=["Widgets"],
    default_response_class=UberResponse,
)


def _get_or_404(store: WidgetStore, widget_id: int) -> Widget:
    widget = store.get(widget_id)
    if widget is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Widget {widget_id} not found",
        )
    return widget


# -----------------------------------------------------------------------------
# POST/PUT/PATCH Endpoints
# -----------------------------------------------------------------------------

# POST new Widget
@router.post("/", status_code=201, name="create_widget")
async def create_widget(
    request: Request,
    widget_req: WidgetCreate,
    store: WidgetStore = Depends(get_widget_store)
):
    widget = store.create(widget_req)
    return UberResponse(
        hateoas_widget(request, widget),
        status_code=status.HTTP_201_CREATED,
        headers={"Location": str(request.url_for("get_widget", widget_id=widget.id))},
    )


# PUT Widget replacement
@router.put("/{widget_id}", status_code=200, name="replace_widget")
async def replace_widget(
    request: Request,
    widget_id: int,
    widget_req: WidgetCreate,
    store: WidgetStore = Depends(get_widget_store)
):
    _get_or_404(store, widget_id)
    widget = store.replace(widget_id, widget_req)
    return UberResponse(hateoas_widget(request, widget))


# PATCH Widget update
@router.patch("/{widget_id}", status_code=200, name="update_widget")
async def update_widget(
    request: Request,
    widget_id: int,
    widget_update: WidgetUpdate,
    store: WidgetStore = Depends(get_widget_store)
):
    """Updates only the provided fields of a widget"""
    _get_or_404(store, widget_id)

    if not widget_update.model_dump(exclude_unset=True):
        # Nothing to update; caller sent empty payload
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields provided for update",
        )

    widget = store.update(widget_id, widget_update)
    return UberResponse(hateoas_widget(request, widget))


# -----------------------------------------------------------------------------
# GET Endpoints
# -----------------------------------------------------------------------------

@router.get("/", status_code=200, name="list_widgets")
async def list_widgets(
    request: Request,
    search: Optional[str] = Query(None, description="Search by name"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Maximum number of records to return"),
    store: WidgetStore = Depends(get_widget_store)
):
    widgets = store.list(search=search, skip=skip, limit=limit)
    return UberResponse(hateoas_widgets(request, widgets))


@router.get("/{widget_id}", status_code=200, name="get_widget")
async def get_widget(
    request: Request,
    widget_id: int,
    store: WidgetStore = Depends(get_widget_store)
):
    widget = _get_or_404(store, widget_id)
    document = to_uber(hateoas_widget(request, widget))

    etag, not_modified = handle_conditional_request(request, document)
    if not_modified:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers={"ETag": etag})

    response = UberResponse(document)
    set_etag_headers(response, etag)
    return response


# -----------------------------------------------------------------------------
# DELETE Endpoint
# -----------------------------------------------------------------------------

@router.delete("/{widget_id}", status_code=204, name="delete_widget")
async def delete_widget(
    widget_id: int,
    store: WidgetStore = Depends(get_widget_store)
):
    if not store.delete(widget_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Widget {widget_id} not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
