"""Mini README: FastAPI dashboard backend for Finsync.

Structure:
    * DashboardSession - per-user bundle of state, controller, and list view.
    * create_application - application factory wiring routes to sessions.

The user is identified by the ``X-User-Id`` header; sign-in itself happens
elsewhere. Requests without the header get a throwaway signed-out session so
every sync intent reports ``skipped``. Each signed-in user keeps one session,
which is what makes the initial load happen only once. At most
``max_sessions`` are kept; the least recently used one is dropped and that
user reloads from the remote store on their next visit.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Dict, Optional

from fastapi import FastAPI, Form, Header, HTTPException
from fastapi.responses import JSONResponse

from ..auth import AuthSession, UserScope
from ..configuration import FinsyncSettings, get_settings
from ..finance.metrics import category_breakdown, monthly_trends, summarise
from ..finance.records import TransactionType
from ..finance.state import LocalStateStore
from ..logging_utils import get_logger
from ..remote import RemoteStore, build_store
from ..sync.controller import SyncController
from ..sync.notifications import Notifier
from ..sync.results import SyncResult
from .list_view import NoActiveDraftError, TransactionListView

LOGGER = get_logger(__name__)


class DashboardSession:
    """Everything one user's dashboard needs between requests."""

    def __init__(self, store: RemoteStore, settings: FinsyncSettings, user: Optional[UserScope]) -> None:
        self.auth = AuthSession(user)
        self.state = LocalStateStore()
        self.controller = SyncController(store, self.state, self.auth, settings.salary_policy)
        self.view = TransactionListView(self.controller, Notifier(settings.notification_history))

    def snapshot(self) -> Dict[str, object]:
        user = self.auth.current_user
        return {
            "user": user.uid if user else None,
            "summary": summarise(self.state.transactions),
            "salary": self.state.salary,
            "transactions": [record.as_dict() for record in self.view.display_order()],
            "draft": self.view.draft.as_dict() if self.view.draft else None,
        }


def _result_response(result: SyncResult, session: DashboardSession) -> JSONResponse:
    return JSONResponse({"result": result.as_dict(), **session.snapshot()})


def create_application(
    store: Optional[RemoteStore] = None, settings: Optional[FinsyncSettings] = None
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = settings or get_settings()
    store = store or build_store(settings)
    app = FastAPI(title="Finsync Dashboard", version="0.1.0")
    sessions: "OrderedDict[str, DashboardSession]" = OrderedDict()

    def session_for(user_id: Optional[str]) -> DashboardSession:
        if not user_id:
            return DashboardSession(store, settings, None)
        if user_id in sessions:
            sessions.move_to_end(user_id)
            return sessions[user_id]
        LOGGER.info("Opening dashboard session for user %s", user_id)
        sessions[user_id] = DashboardSession(store, settings, UserScope(uid=user_id))
        while len(sessions) > settings.max_sessions:
            evicted, _ = sessions.popitem(last=False)
            LOGGER.info("Dropping idle dashboard session for user %s", evicted)
        return sessions[user_id]

    @app.get("/")
    async def dashboard(x_user_id: Optional[str] = Header(None)) -> JSONResponse:
        """Load transactions on first visit and return the dashboard snapshot."""

        session = session_for(x_user_id)
        result = await session.view.load()
        return _result_response(result, session)

    @app.post("/transactions")
    async def create_transaction(
        transaction_type: str = Form(...),
        amount: str = Form(""),
        category: str = Form(""),
        note: Optional[str] = Form(None),
        occurred_on: Optional[str] = Form(None),
        x_user_id: Optional[str] = Header(None),
    ) -> JSONResponse:
        session = session_for(x_user_id)
        try:
            result = await session.view.create(
                transaction_type, amount, category, note=note, occurred_on=occurred_on
            )
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return _result_response(result, session)

    @app.post("/transactions/{transaction_id}/delete")
    async def delete_transaction(
        transaction_id: str, x_user_id: Optional[str] = Header(None)
    ) -> JSONResponse:
        session = session_for(x_user_id)
        try:
            result = await session.view.delete(transaction_id)
        except KeyError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        return _result_response(result, session)

    @app.post("/transactions/{transaction_id}/edit")
    async def begin_edit(
        transaction_id: str, x_user_id: Optional[str] = Header(None)
    ) -> JSONResponse:
        """Switch a record into the inline editor."""

        session = session_for(x_user_id)
        try:
            draft = session.view.begin_edit(transaction_id)
        except KeyError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        return JSONResponse({"draft": draft.as_dict()})

    @app.post("/draft")
    async def update_draft(
        transaction_type: Optional[str] = Form(None),
        amount: Optional[str] = Form(None),
        category: Optional[str] = Form(None),
        note: Optional[str] = Form(None),
        x_user_id: Optional[str] = Header(None),
    ) -> JSONResponse:
        session = session_for(x_user_id)
        submitted = {
            "transaction_type": transaction_type,
            "amount": amount,
            "category": category,
            "note": note,
        }
        try:
            draft = session.view.update_draft(
                **{key: value for key, value in submitted.items() if value is not None}
            )
        except NoActiveDraftError as error:
            raise HTTPException(status_code=409, detail=str(error)) from error
        except ValueError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return JSONResponse({"draft": draft.as_dict()})

    @app.post("/draft/save")
    async def save_draft(x_user_id: Optional[str] = Header(None)) -> JSONResponse:
        session = session_for(x_user_id)
        try:
            result = await session.view.save_edit()
        except NoActiveDraftError as error:
            raise HTTPException(status_code=409, detail=str(error)) from error
        return _result_response(result, session)

    @app.post("/draft/cancel")
    async def cancel_draft(x_user_id: Optional[str] = Header(None)) -> JSONResponse:
        session = session_for(x_user_id)
        session.view.cancel_edit()
        return JSONResponse({"draft": None})

    @app.get("/charts")
    async def charts(x_user_id: Optional[str] = Header(None)) -> JSONResponse:
        """Data consumed by the category and trend charts."""

        records = session_for(x_user_id).state.transactions
        return JSONResponse(
            {
                "expense_by_category": category_breakdown(records, TransactionType.EXPENSE),
                "income_by_category": category_breakdown(records, TransactionType.INCOME),
                "monthly_trends": monthly_trends(records),
            }
        )

    @app.get("/notifications")
    async def notifications(x_user_id: Optional[str] = Header(None)) -> JSONResponse:
        drained = session_for(x_user_id).view.notifier.drain()
        return JSONResponse(
            {"notifications": [{"level": item.level, "message": item.message} for item in drained]}
        )

    return app
