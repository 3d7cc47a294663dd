"""
Taco Cloud - Application Entry Point
======================================
FastAPI app initialization, middleware, and router registration.
"""

import logging
import urllib.parse
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Depends
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from apscheduler.schedulers.background import BackgroundScheduler

from config import settings
from config.database import Base, engine
from common.exceptions import TacoCloudError
from common.session_store import session_store, new_session_id, SESSION_COOKIE
from common.templating import templates
from modules.auth.deps import get_current_active_user
from modules.auth.guard import access_guard

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("tacocloud.web")
scheduler_logger = logging.getLogger("tacocloud.scheduler")


# ==========================================
# Import ALL models so Base can see them
# ==========================================
from modules.user.models import User  # noqa: F401,E402
from modules.ingredient.models import Ingredient  # noqa: F401,E402
from modules.taco.models import Taco, TacoIngredient  # noqa: F401,E402
from modules.order.models import TacoOrder, taco_order_tacos  # noqa: F401,E402

# ==========================================
# Import routers
# ==========================================
from modules.auth.routes import router as auth_router  # noqa: E402
from modules.design.routes import router as design_router  # noqa: E402
from modules.order.routes import router as order_router  # noqa: E402


def _wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "")


# ==========================================
# Exception handler: 401 → redirect to login
# ==========================================
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Redirect 401 to login for browser requests, JSON otherwise."""
    if exc.status_code == 401 and _wants_html(request):
        next_url = str(request.url.path)
        if request.url.query:
            next_url += "?" + str(request.url.query)
        return RedirectResponse(f"/login?next={urllib.parse.quote(next_url, safe='')}", status_code=302)
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)


# ==========================================
# Exception handler: business errors → error page
# ==========================================
async def business_exception_handler(request: Request, exc: TacoCloudError):
    """Storage failures and invalid order state surface as a generic, retryable error page."""
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    else:
        logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)

    if _wants_html(request):
        return templates.TemplateResponse("error.html", {
            "request": request,
            "message": exc.message,
            "retry_url": request.headers.get("referer", "/"),
        }, status_code=exc.status_code)
    return JSONResponse({"detail": exc.message}, status_code=exc.status_code)


# ==========================================
# Background Scheduler: Expired Draft Cleanup
# ==========================================
def _purge_expired_drafts():
    """Background job: drop draft orders whose session has gone idle."""
    count = session_store.purge_expired()
    if count:
        scheduler_logger.info(f"Purged {count} expired draft orders")


scheduler = BackgroundScheduler()


@asynccontextmanager
async def lifespan(app):
    # Auto-create any missing tables (safe for existing tables)
    Base.metadata.create_all(bind=engine)

    scheduler.add_job(_purge_expired_drafts, 'interval', seconds=60, id='expired_drafts', replace_existing=True)
    scheduler.start()
    scheduler_logger.info("Background scheduler started (drafts: 60s)")
    yield
    scheduler.shutdown()
    scheduler_logger.info("Background scheduler stopped")


# ==========================================
# Create App
# ==========================================
app = FastAPI(
    title="Taco Cloud",
    description="Design your taco, we'll deliver it",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    lifespan=lifespan,
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(TacoCloudError, business_exception_handler)


# ==========================================
# Middleware: Access Guard
# ==========================================
app.middleware("http")(access_guard)


# ==========================================
# Middleware: Browsing Session Id
# ==========================================
@app.middleware("http")
async def session_id_middleware(request: Request, call_next):
    """Give every browser a session id cookie; the draft order is keyed by it."""
    session_id = request.cookies.get(SESSION_COOKIE)
    is_new = not session_id
    if is_new:
        session_id = new_session_id()
    request.state.session_id = session_id

    response = await call_next(request)
    if is_new:
        response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return response


# ==========================================
# Register Routers
# ==========================================
app.include_router(auth_router)
app.include_router(design_router)
app.include_router(order_router)


# ==========================================
# Health check
# ==========================================
@app.get("/health")
async def health():
    return {"status": "ok"}


# ==========================================
# Home
# ==========================================
@app.get("/", response_class=HTMLResponse)
async def home(request: Request, user=Depends(get_current_active_user)):
    return templates.TemplateResponse("home.html", {
        "request": request,
        "user": user,
    })
