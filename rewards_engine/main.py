import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rewards_engine.config import get_settings
from rewards_engine.services.engine_config import engine_config_from_settings
from rewards_engine.services.snapshot_service import SnapshotStore
from rewards_engine.services.snapshot_sources import build_source

from rewards_engine.routes.levels import router as levels_router
from rewards_engine.routes.users import router as users_router
from rewards_engine.routes.rewards import router as rewards_router
from rewards_engine.routes.redemptions import router as redemptions_router
from rewards_engine.routes.leaderboard import router as leaderboard_router
from rewards_engine.routes.admin import router as admin_router


logger = logging.getLogger(__name__)


def create_app(store: SnapshotStore | None = None, engine_config=None) -> FastAPI:
    settings = get_settings()
    logging.getLogger("rewards_engine").setLevel(settings.log_level)

    app = FastAPI(title="Recognition Rewards Engine")

    # ─── CORS ─────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # a broken level table fails here, before any request is served
    app.state.engine_config = engine_config or engine_config_from_settings(settings)
    app.state.store = store or SnapshotStore(build_source(settings))

    @app.on_event("startup")
    def startup():
        if app.state.store.snapshot.version == 0:
            app.state.store.refresh()
        logger.info("rewards engine started", extra={"snapshot_source": settings.snapshot_source})

    app.include_router(levels_router)
    app.include_router(users_router)
    app.include_router(rewards_router)
    app.include_router(redemptions_router)
    app.include_router(leaderboard_router)
    app.include_router(admin_router)

    @app.get("/")
    def read_root():
        return {"message": "Recognition Rewards Engine is running"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("rewards_engine.main:app", host="127.0.0.1", port=8001, reload=True)
