"""ASGI application for Famly."""
# mypy: ignore-errors

from __future__ import annotations

import logging
from datetime import date, datetime, time
from time import perf_counter
from typing import Any, Optional
from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from famly import __version__, metrics, permissions
from famly.auth import EphemeralSessionStorage, IdentityProvider
from famly.config import Settings, get_settings
from famly.data import events as event_data
from famly.data import expenses as expense_data
from famly.data import families as family_data
from famly.data import invites as invite_data
from famly.data import members as member_data
from famly.data import shopping as shopping_data
from famly.data.tasks import get_task, upsert_task
from famly.errors import (
    AuthError,
    ConflictError,
    FamlyError,
    NotFoundError,
    PartialCompletionError,
    PermissionDeniedError,
    StoreError,
)
from famly.logging_utils import configure_logging as configure_app_logging
from famly.models import (
    AuthSession,
    CalendarEvent,
    CategoryTotal,
    EventDraft,
    Expense,
    ExpenseDraft,
    Family,
    FamilyInvite,
    FamilyMember,
    FamilyMembership,
    FamilyRole,
    ShoppingItem,
    ShoppingList,
    Task,
    TaskDraft,
    TaskNode,
    TaskStatus,
    UserProfile,
)
from famly.results import Result
from famly.server import deps
from famly.store import RemoteStore
from famly.tenancy import FamilyContext
from famly.views import tasks as task_views
from famly.views.calendar import upcoming_events
from famly.views.dashboard import DashboardSummary, build_dashboard
from famly.views.finance import format_amount, summarize_expenses
from famly.views.state import ShoppingBoard, TaskBoard

logger = logging.getLogger(__name__)

_ERROR_STATUS = (
    (AuthError, status.HTTP_401_UNAUTHORIZED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (StoreError, status.HTTP_502_BAD_GATEWAY),
    (PartialCompletionError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def _status_for(exc: FamlyError) -> int:
    for error_type, code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def _json_safe(value: Any) -> Any:
    """Convert non-serializable values into JSON-safe representations."""

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, (list, tuple)):
        return [_json_safe(entry) for entry in value]
    if isinstance(value, dict):
        return {key: _json_safe(sub_value) for key, sub_value in value.items()}
    return repr(value)


def _unwrap(result: Result) -> Any:
    if not result.ok:
        raise result.error
    return result.value


def _configure_logging(settings: Settings) -> None:
    configure_app_logging(settings.log_level, settings.log_format, [settings.supabase_anon_key or ""])


def create_app() -> FastAPI:
    """Create and configure a FastAPI application instance."""

    settings = get_settings()
    _configure_logging(settings)

    application = FastAPI(title="Famly", version=__version__)
    logger.debug("Application created with backend %s", settings.backend)

    if settings.log_requests:
        access_logger = logging.getLogger("famly.access")

        @application.middleware("http")
        async def log_request_response(request: Request, call_next):
            """Log request/response details without leaking tokens."""

            request_id = request.headers.get("X-Request-ID") or uuid4().hex
            request.state.request_id = request_id
            start = perf_counter()
            path = request.url.path
            method = request.method
            try:
                response: Response = await call_next(request)
            except Exception:
                duration_ms = (perf_counter() - start) * 1000
                access_logger.exception(
                    "HTTP %s %s status=500 duration_ms=%.2f",
                    method,
                    path,
                    duration_ms,
                    extra={"request_id": request_id},
                )
                metrics.REQUEST_COUNT.labels(method=method, path=path, status="500").inc()
                metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000.0)
                raise

            duration_ms = (perf_counter() - start) * 1000
            response.headers.setdefault("X-Request-ID", request_id)
            access_logger.info(
                "HTTP %s %s status=%s duration_ms=%.2f",
                method,
                path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id, "family_id": request.headers.get("X-Family-Id")},
            )
            metrics.REQUEST_COUNT.labels(method=method, path=path, status=str(response.status_code)).inc()
            metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000.0)
            return response

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        log_kwargs: dict[str, Any] = {}
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            log_kwargs["extra"] = {"request_id": request_id}

        logger.warning(
            "Validation error on %s %s: %s",
            request.method,
            request.url.path,
            exc.errors(),
            **log_kwargs,
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": [{key: _json_safe(value) for key, value in error.items()} for error in exc.errors()]},
        )

    @application.exception_handler(FamlyError)
    async def famly_exception_handler(request: Request, exc: FamlyError):
        code = _status_for(exc)
        log = logger.error if code >= 500 else logger.info
        log("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
        return JSONResponse(status_code=code, content={"detail": str(exc), "error": type(exc).__name__})

    @application.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    # Auth

    @application.post(
        "/auth/signup",
        response_model=Optional[AuthSession],
        status_code=status.HTTP_201_CREATED,
        summary="Create an account",
    )
    def auth_signup(
        payload: SignUpRequest,
        provider: IdentityProvider = Depends(deps.get_identity_provider),
    ) -> Optional[AuthSession]:
        return provider.sign_up(payload.email, payload.password, payload.full_name)

    @application.post("/auth/login", response_model=AuthSession, summary="Sign in with email and password")
    def auth_login(
        payload: SignInRequest,
        provider: IdentityProvider = Depends(deps.get_identity_provider),
    ) -> AuthSession:
        return provider.sign_in(payload.email, payload.password)

    @application.post("/auth/logout", status_code=status.HTTP_204_NO_CONTENT, summary="Sign out")
    def auth_logout(
        request: Request,
        user: UserProfile = Depends(deps.get_current_user),
        provider: IdentityProvider = Depends(deps.get_identity_provider),
        storage: EphemeralSessionStorage = Depends(deps.get_session_storage),
    ) -> Response:
        storage.save(AuthSession(access_token=deps.bearer_token(request), user=user))
        provider.sign_out()
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @application.get("/auth/me", response_model=UserProfile, summary="Current user")
    def auth_me(user: UserProfile = Depends(deps.get_current_user)) -> UserProfile:
        return user

    # Families and onboarding

    @application.get("/families", response_model=list[FamilyMembership], summary="Families of the current user")
    def families_list(context: FamilyContext = Depends(deps.get_family_context)) -> list[FamilyMembership]:
        return context.memberships

    @application.post(
        "/families",
        response_model=FamilyMembership,
        status_code=status.HTTP_201_CREATED,
        summary="Create a family owned by the current user",
    )
    def families_create(
        payload: CreateFamilyRequest,
        user: UserProfile = Depends(deps.get_current_user),
        store: RemoteStore = Depends(deps.get_store),
    ) -> FamilyMembership:
        _, membership = family_data.create_family(store, payload.name, user.id)
        return membership

    @application.get("/onboarding", response_model=OnboardingState, summary="Whether the user still needs a family")
    def onboarding_state(context: FamilyContext = Depends(deps.get_family_context)) -> OnboardingState:
        return OnboardingState(
            needs_family=not context.has_family,
            active_family_id=context.active_family_id,
            family_count=len(context.memberships),
        )

    @application.post(
        "/onboarding",
        response_model=FamilyMembership,
        status_code=status.HTTP_201_CREATED,
        summary="Create the first family or join one with an invite code",
    )
    def onboarding_complete(
        payload: OnboardingRequest,
        user: UserProfile = Depends(deps.get_current_user),
        store: RemoteStore = Depends(deps.get_store),
    ) -> FamilyMembership:
        if payload.invite_code:
            return invite_data.redeem_invite(store, payload.invite_code, user.id)
        if not payload.family_name:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Provide a family name or an invite code",
            )
        _, membership = family_data.create_family(store, payload.family_name, user.id)
        return membership

    # Dashboard

    @application.get("/dashboard", response_model=DashboardSummary, summary="Home-screen summary")
    def dashboard(
        day: Optional[date] = Query(default=None, alias="date"),
        context: FamilyContext = Depends(deps.get_active_family),
        store: RemoteStore = Depends(deps.get_store),
    ) -> DashboardSummary:
        board = TaskBoard(store, context.family_id, context.user.id)
        _unwrap(board.refresh())
        return build_dashboard(
            board.tasks,
            event_data.get_events(store, context.family_id),
            member_data.list_family_members(store, context.family_id),
            today=day,
        )

    # Tasks

    @application.get("/tasks", response_model=TaskListResponse, summary="Filtered task tree")
    def tasks_list(
        status_filter: str = Query(default=task_views.ALL, alias="status"),
        search: str = Query(default="", max_length=255),
        context: FamilyContext = Depends(deps.get_active_family),
        store: RemoteStore = Depends(deps.get_store),
    ) -> TaskListResponse:
        board = TaskBoard(store, context.family_id, context.user.id)
        _unwrap(board.refresh())
        today = date.today()
        return TaskListResponse(
            tasks=board.view(task_views.parse_status_filter(status_filter), search),
            next_up=board.next_up(),
            overdue_ids=[task.id for task in board.tasks if task_views.is_overdue(task, today)],
            completed=task_views.completed_count(board.tasks),
            total=len(board.tasks),
        )

    @application.post(
        "/tasks",
        response_model=Task,
        status_code=status.HTTP_201_CREATED,
        summary="Create a task",
    )
    def tasks_create(
        payload: TaskRequest,
        context: FamilyContext = Depends(deps.require_permission(permissions.CREATE_CONTENT)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> Task:
        board = TaskBoard(store, context.family_id, context.user.id)
        return _unwrap(
            board.add(
                payload.title,
                due_date=payload.due_date,
                due_time=payload.due_time,
                parent_id=payload.parent_id,
                description=payload.description,
                assigned_to=payload.assigned_to,
                status=payload.status or TaskStatus.TODO,
            )
        )

    @application.put("/tasks/{task_id}", response_model=Task, summary="Replace a task")
    def tasks_update(
        task_id: str,
        payload: TaskRequest,
        context: FamilyContext = Depends(deps.require_permission(permissions.EDIT_CONTENT)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> Task:
        existing = get_task(store, context.family_id, task_id)
        edited = existing.model_copy(
            update={
                "title": payload.title,
                "description": payload.description,
                "due_date": payload.due_date,
                "due_time": payload.due_time,
                "assigned_to": payload.assigned_to,
                "parent_id": payload.parent_id,
            }
        )
        if payload.status is not None and payload.status != existing.status:
            edited = task_views.apply_status_change(edited, payload.status, context.user.id)
        return upsert_task(store, TaskDraft.from_task(edited))

    @application.post("/tasks/{task_id}/status", response_model=Task, summary="Change or cycle a task's status")
    def tasks_set_status(
        task_id: str,
        payload: StatusChangeRequest,
        context: FamilyContext = Depends(deps.require_permission(permissions.EDIT_CONTENT)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> Task:
        board = TaskBoard(store, context.family_id, context.user.id)
        _unwrap(board.refresh())
        if payload.status is None:
            return _unwrap(board.cycle_status(task_id))
        return _unwrap(board.set_status(task_id, payload.status))

    @application.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a task")
    def tasks_delete(
        task_id: str,
        context: FamilyContext = Depends(deps.require_permission(permissions.DELETE_CONTENT)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> Response:
        board = TaskBoard(store, context.family_id, context.user.id)
        _unwrap(board.delete(task_id))
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # Calendar

    @application.get("/calendar", response_model=list[CalendarEvent], summary="Family events")
    def calendar_list(
        upcoming: bool = Query(default=False),
        limit: int = Query(default=5, ge=1, le=100),
        context: FamilyContext = Depends(deps.get_active_family),
        store: RemoteStore = Depends(deps.get_store),
    ) -> list[CalendarEvent]:
        events = event_data.get_events(store, context.family_id)
        if upcoming:
            return upcoming_events(events, limit=limit)
        return events

    @application.post(
        "/calendar",
        response_model=CalendarEvent,
        status_code=status.HTTP_201_CREATED,
        summary="Create an event",
    )
    def calendar_create(
        payload: EventRequest,
        context: FamilyContext = Depends(deps.require_permission(permissions.CREATE_CONTENT)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> CalendarEvent:
        return event_data.create_event(store, context.family_id, payload.to_draft(context.user.id))

    @application.put("/calendar/{event_id}", response_model=CalendarEvent, summary="Replace an event")
    def calendar_update(
        event_id: str,
        payload: EventRequest,
        context: FamilyContext = Depends(deps.require_permission(permissions.EDIT_CONTENT)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> CalendarEvent:
        return event_data.update_event(store, context.family_id, event_id, payload.to_draft(context.user.id))

    @application.delete("/calendar/{event_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an event")
    def calendar_delete(
        event_id: str,
        context: FamilyContext = Depends(deps.require_permission(permissions.DELETE_CONTENT)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> Response:
        event_data.delete_event(store, context.family_id, event_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # Shopping

    def _family_list(store: RemoteStore, family_id: str, list_id: str) -> ShoppingList:
        for shopping_list in shopping_data.get_shopping_lists(store, family_id):
            if shopping_list.id == list_id:
                return shopping_list
        raise NotFoundError(f"Shopping list {list_id} not found")

    @application.get("/shopping", response_model=list[ShoppingList], summary="Shopping lists")
    def shopping_lists(
        context: FamilyContext = Depends(deps.get_active_family),
        store: RemoteStore = Depends(deps.get_store),
    ) -> list[ShoppingList]:
        return shopping_data.get_shopping_lists(store, context.family_id)

    @application.post(
        "/shopping",
        response_model=ShoppingList,
        status_code=status.HTTP_201_CREATED,
        summary="Create a shopping list",
    )
    def shopping_list_create(
        payload: NameRequest,
        context: FamilyContext = Depends(deps.require_permission(permissions.CREATE_CONTENT)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> ShoppingList:
        return shopping_data.create_shopping_list(store, context.family_id, payload.name)

    @application.delete(
        "/shopping/{list_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete a shopping list and its items",
    )
    def shopping_list_delete(
        list_id: str,
        context: FamilyContext = Depends(deps.require_permission(permissions.DELETE_CONTENT)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> Response:
        shopping_data.delete_shopping_list(store, context.family_id, list_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @application.get("/shopping/{list_id}/items", response_model=ShoppingItemsResponse, summary="Items of a list")
    def shopping_items(
        list_id: str,
        context: FamilyContext = Depends(deps.get_active_family),
        store: RemoteStore = Depends(deps.get_store),
    ) -> ShoppingItemsResponse:
        shopping_list = _family_list(store, context.family_id, list_id)
        board = ShoppingBoard(store, list_id)
        _unwrap(board.refresh())
        return ShoppingItemsResponse(shopping_list=shopping_list, items=board.items, remaining=board.remaining)

    @application.post(
        "/shopping/{list_id}/items",
        response_model=ShoppingItem,
        status_code=status.HTTP_201_CREATED,
        summary="Add an item to a list",
    )
    def shopping_item_create(
        list_id: str,
        payload: TitleRequest,
        context: FamilyContext = Depends(deps.require_permission(permissions.CREATE_CONTENT)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> ShoppingItem:
        _family_list(store, context.family_id, list_id)
        return _unwrap(ShoppingBoard(store, list_id).add(payload.title))

    @application.post(
        "/shopping/{list_id}/items/{item_id}/toggle",
        response_model=ShoppingItem,
        summary="Flip an item's done flag",
    )
    def shopping_item_toggle(
        list_id: str,
        item_id: str,
        context: FamilyContext = Depends(deps.require_permission(permissions.EDIT_CONTENT)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> ShoppingItem:
        _family_list(store, context.family_id, list_id)
        board = ShoppingBoard(store, list_id)
        _unwrap(board.refresh())
        return _unwrap(board.toggle(item_id))

    @application.delete(
        "/shopping/{list_id}/items/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Remove an item",
    )
    def shopping_item_delete(
        list_id: str,
        item_id: str,
        context: FamilyContext = Depends(deps.require_permission(permissions.DELETE_CONTENT)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> Response:
        _family_list(store, context.family_id, list_id)
        board = ShoppingBoard(store, list_id)
        _unwrap(board.refresh())
        if all(item.id != item_id for item in board.items):
            raise NotFoundError(f"Shopping item {item_id} not found")
        _unwrap(board.delete(item_id))
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # Finance

    @application.get("/finance", response_model=FinanceResponse, summary="Expenses with category summary")
    def finance_overview(
        context: FamilyContext = Depends(deps.get_active_family),
        store: RemoteStore = Depends(deps.get_store),
    ) -> FinanceResponse:
        expenses = expense_data.get_expenses(store, context.family_id)
        summary = summarize_expenses(expenses)
        return FinanceResponse(
            expenses=expenses,
            total=summary.total,
            formatted_total=format_amount(summary.total, settings.currency_symbol),
            by_category=summary.by_category,
        )

    @application.post(
        "/finance",
        response_model=Expense,
        status_code=status.HTTP_201_CREATED,
        summary="Record an expense",
    )
    def finance_create(
        payload: ExpenseRequest,
        context: FamilyContext = Depends(deps.require_permission(permissions.CREATE_CONTENT)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> Expense:
        draft = ExpenseDraft(
            amount=payload.amount,
            category=payload.category,
            description=payload.description,
            date=payload.spent_on or date.today(),
            paid_by=payload.paid_by or context.user.id,
        )
        return expense_data.create_expense(store, context.family_id, draft)

    @application.delete("/finance/{expense_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an expense")
    def finance_delete(
        expense_id: str,
        context: FamilyContext = Depends(deps.require_permission(permissions.DELETE_CONTENT)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> Response:
        expense_data.delete_expense(store, context.family_id, expense_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # Settings

    @application.get("/settings", response_model=SettingsResponse, summary="Family settings and members")
    def settings_view(
        context: FamilyContext = Depends(deps.get_active_family),
        store: RemoteStore = Depends(deps.get_store),
    ) -> SettingsResponse:
        return SettingsResponse(
            family=family_data.get_family(store, context.family_id),
            role=context.role,
            members=member_data.list_family_members(store, context.family_id),
        )

    @application.put("/settings", response_model=Family, summary="Rename the family")
    def settings_update(
        payload: NameRequest,
        context: FamilyContext = Depends(deps.require_permission(permissions.MANAGE_SETTINGS)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> Family:
        return family_data.rename_family(store, context.family_id, payload.name)

    @application.get("/settings/invites", response_model=list[FamilyInvite], summary="Invites of the family")
    def invites_list(
        context: FamilyContext = Depends(deps.require_permission(permissions.INVITE_MEMBERS)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> list[FamilyInvite]:
        return invite_data.list_invites(store, context.family_id)

    @application.post(
        "/settings/invites",
        response_model=FamilyInvite,
        status_code=status.HTTP_201_CREATED,
        summary="Invite someone by email",
    )
    def invites_create(
        payload: InviteRequest,
        context: FamilyContext = Depends(deps.require_permission(permissions.INVITE_MEMBERS)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> FamilyInvite:
        if permissions.outranks(payload.role, context.role):
            raise PermissionDeniedError(f"Cannot invite with role {payload.role.value}")
        return invite_data.create_invite(store, context.family_id, payload.email, payload.role, context.user.id)

    @application.post(
        "/settings/invites/{invite_id}/revoke",
        response_model=FamilyInvite,
        summary="Revoke a pending invite",
    )
    def invites_revoke(
        invite_id: str,
        context: FamilyContext = Depends(deps.require_permission(permissions.INVITE_MEMBERS)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> FamilyInvite:
        return invite_data.revoke_invite(store, context.family_id, invite_id)

    @application.patch(
        "/settings/members/{user_id}",
        response_model=FamilyMembership,
        summary="Change a member's role",
    )
    def members_update(
        user_id: str,
        payload: RoleRequest,
        context: FamilyContext = Depends(deps.require_permission(permissions.MANAGE_MEMBERS)),
        store: RemoteStore = Depends(deps.get_store),
    ) -> FamilyMembership:
        if permissions.outranks(payload.role, context.role):
            raise PermissionDeniedError(f"Cannot grant role {payload.role.value}")
        return member_data.update_member_role(store, context.family_id, user_id, payload.role)

    @application.delete(
        "/settings/members/{user_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Remove a member",
    )
    def members_delete(
        user_id: str,
        context: FamilyContext = Depends(deps.get_active_family),
        store: RemoteStore = Depends(deps.get_store),
    ) -> Response:
        # Leaving the family is allowed for everyone; removing others needs manage_members.
        if user_id != context.user.id:
            permissions.require(context.role, permissions.MANAGE_MEMBERS)
        member_data.remove_family_member(store, context.family_id, user_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # Join

    @application.get("/join/{code}", response_model=InvitePreview, summary="Preview an invite code")
    def join_preview(
        code: str,
        user: UserProfile = Depends(deps.get_current_user),
        store: RemoteStore = Depends(deps.get_store),
    ) -> InvitePreview:
        lookup = invite_data.get_invite(store, code)
        if lookup is None:
            raise NotFoundError(f"Invite code {code!r} not found or expired")
        return InvitePreview(
            family_id=lookup.invite.family_id,
            family_name=lookup.family_name,
            role=lookup.invite.role,
            email=lookup.invite.email,
        )

    @application.post("/join/{code}", response_model=FamilyMembership, summary="Redeem an invite code")
    def join_redeem(
        code: str,
        user: UserProfile = Depends(deps.get_current_user),
        store: RemoteStore = Depends(deps.get_store),
    ) -> FamilyMembership:
        return invite_data.redeem_invite(store, code, user.id)

    @application.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return application


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignUpRequest(CamelModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1, max_length=255)
    full_name: str = Field(default="", max_length=255)


class SignInRequest(CamelModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1, max_length=255)


class CreateFamilyRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)


class NameRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)


class TitleRequest(CamelModel):
    title: str = Field(min_length=1, max_length=255)


class OnboardingRequest(CamelModel):
    family_name: Optional[str] = Field(default=None, max_length=255)
    invite_code: Optional[str] = Field(default=None, max_length=32)


class OnboardingState(CamelModel):
    needs_family: bool
    active_family_id: Optional[str] = None
    family_count: int = 0


class TaskRequest(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    due_date: Optional[date] = None
    due_time: Optional[time] = None
    assigned_to: Optional[str] = None
    status: Optional[TaskStatus] = None
    parent_id: Optional[str] = None


class StatusChangeRequest(CamelModel):
    status: Optional[TaskStatus] = None


class TaskListResponse(CamelModel):
    tasks: list[TaskNode] = Field(default_factory=list)
    next_up: Optional[Task] = None
    overdue_ids: list[str] = Field(default_factory=list)
    completed: int = 0
    total: int = 0


class EventRequest(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    notes: Optional[str] = Field(default=None, max_length=2000)
    start_at: datetime
    end_at: Optional[datetime] = None

    def to_draft(self, user_id: str) -> EventDraft:
        return EventDraft(
            title=self.title,
            notes=self.notes,
            start_at=self.start_at,
            end_at=self.end_at,
            created_by=user_id,
        )


class ShoppingItemsResponse(CamelModel):
    shopping_list: ShoppingList = Field(alias="list")
    items: list[ShoppingItem] = Field(default_factory=list)
    remaining: int = 0


class ExpenseRequest(CamelModel):
    amount: float = Field(gt=0)
    category: str = Field(default="Groceries", min_length=1, max_length=64)
    description: Optional[str] = Field(default=None, max_length=500)
    spent_on: Optional[date] = Field(default=None, alias="date")
    paid_by: Optional[str] = None


class FinanceResponse(CamelModel):
    expenses: list[Expense] = Field(default_factory=list)
    total: float = 0.0
    formatted_total: str
    by_category: list[CategoryTotal] = Field(default_factory=list)


class SettingsResponse(CamelModel):
    family: Family
    role: FamilyRole
    members: list[FamilyMember] = Field(default_factory=list)


class InviteRequest(CamelModel):
    email: str = Field(min_length=3, max_length=255)
    role: FamilyRole = FamilyRole.MEMBER


class RoleRequest(CamelModel):
    role: FamilyRole


class InvitePreview(CamelModel):
    family_id: str
    family_name: Optional[str] = None
    role: FamilyRole
    email: str = ""


app = create_app()

__all__ = ["app", "create_app"]
