"""WebSocket router: /ws/reports."""
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from oceanwatch.report_store import connection_manager, report_store

router = APIRouter(tags=["ws"])


@router.websocket("/ws/reports")
async def ws_reports(websocket: WebSocket):
    """Live feed: on connect send all reports; then stream report/analytics updates."""
    await websocket.accept()
    await connection_manager.connect(websocket)
    try:
        await websocket.send_json({
            "type": "snapshot",
            "payload": [r.model_dump(mode="json") for r in report_store.snapshot()],
        })
        while True:
            try:
                _ = await websocket.receive_text()
            except WebSocketDisconnect:
                break
    finally:
        await connection_manager.disconnect(websocket)
