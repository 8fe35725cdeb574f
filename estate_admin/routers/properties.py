"""
Property API endpoints consumed by the admin dashboard's REST data provider.
List endpoints use `_start`/`_end`/`_sort`/`_order` and report totals in `x-total-count`.
"""

from fastapi import APIRouter, Depends, Path, Query, Response, status
from typing import List, Optional
from uuid import UUID

from estate_admin.config import settings
from estate_admin.repositories.property import PropertySearchFilters
from estate_admin.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyDetailResponse,
    MessageResponse
)
from estate_admin.schemas.error import get_crud_error_responses, get_common_error_responses
from estate_admin.services.property import PropertyService
from estate_admin.utils.dependencies import RequestContext, get_property_service, get_request_context
from estate_admin.utils.exceptions import APIException, InternalServerError, ValidationError
from estate_admin.utils.pagination import set_total_count


router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get(
    "",
    response_model=List[PropertyResponse],
    status_code=status.HTTP_200_OK,
    summary="List properties",
    description="Filtered, sorted, offset-paginated property list. Total match count is in `x-total-count`.",
    responses=get_common_error_responses()
)
async def list_properties(
    response: Response,
    start: int = Query(0, alias="_start", ge=0, description="Offset of the first row"),
    end: Optional[int] = Query(None, alias="_end", ge=0, description="Offset after the last row"),
    sort: Optional[str] = Query(None, alias="_sort", description="Field to sort by"),
    order: Optional[str] = Query(None, alias="_order", pattern="^(asc|desc|ASC|DESC)$", description="asc or desc"),
    title_like: Optional[str] = Query(None, description="Case-insensitive title substring"),
    property_type: Optional[str] = Query(None, alias="propertyType", description="Exact property type"),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    """
    List properties for the admin table.

    Filters combine; a missing filter adds no constraint. Sorting is applied
    only when both `_sort` and `_order` are present.
    """
    filters = PropertySearchFilters(
        start=start,
        end=end,
        sort=sort,
        order=order,
        title_like=title_like,
        property_type=property_type,
        page_size=settings.default_page_size
    )

    properties, total_count = await property_service.list_properties(filters)

    set_total_count(response, total_count)
    return [PropertyResponse.model_validate(prop.to_dict()) for prop in properties]


@router.get(
    "/{property_id}",
    response_model=PropertyDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Get property details",
    description="Get one property with its creator joined in",
    responses=get_crud_error_responses()
)
async def get_property(
    property_id: UUID = Path(..., description="Property ID"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyDetailResponse:
    """
    Get detailed information about a specific property.

    Raises:
        PropertyNotFoundError: If property doesn't exist
    """
    property_obj = await property_service.get_property(property_id)
    return PropertyDetailResponse.model_validate(property_obj.to_dict(include_creator=True))


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Create property",
    description="Create a property for the user identified by `email` and upload its photo.",
    responses=get_crud_error_responses()
)
async def create_property(
    property_data: PropertyCreate,
    context: RequestContext = Depends(get_request_context),
    property_service: PropertyService = Depends(get_property_service)
) -> MessageResponse:
    """
    Create a new property listing.

    The creator is resolved from the body's `email`, falling back to the email
    in the request credential.
    """
    email = property_data.email or context.email
    if not email:
        raise ValidationError("Creator email is required")

    try:
        await property_service.create_property(property_data, email)
    except APIException:
        raise
    except Exception as e:
        raise InternalServerError(f"Failed to create property: {str(e)}")

    return MessageResponse(message="Property created successfully")


@router.patch(
    "/{property_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Update property",
    description="Partially update a property. A supplied photo is uploaded again.",
    responses=get_crud_error_responses()
)
async def update_property(
    property_data: PropertyUpdate,
    property_id: UUID = Path(..., description="Property ID"),
    property_service: PropertyService = Depends(get_property_service)
) -> MessageResponse:
    """Update property details."""
    try:
        await property_service.update_property(property_id, property_data)
    except APIException:
        raise
    except Exception as e:
        raise InternalServerError(f"Failed to update property: {str(e)}")

    return MessageResponse(message="Property updated successfully")


@router.delete(
    "/{property_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete property",
    description="Delete a property and remove it from its creator's property list.",
    responses=get_crud_error_responses()
)
async def delete_property(
    property_id: UUID = Path(..., description="Property ID"),
    property_service: PropertyService = Depends(get_property_service)
) -> MessageResponse:
    """Delete property listing."""
    try:
        await property_service.delete_property(property_id)
    except APIException:
        raise
    except Exception as e:
        raise InternalServerError(f"Failed to delete property: {str(e)}")

    return MessageResponse(message="Property deleted successfully")
