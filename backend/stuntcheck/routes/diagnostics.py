"""
StuntCheck Gateway — Diagnostic Routes
========================================

What:  Manual connectivity checks for the inference service and a route
       listing page.
    - GET /api/checking-flask : JSON probe of the model server status URL
    - GET /api/check-flask    : HTML page with a button calling the probe
    - GET /                   : HTML list of every registered route
"""

import html
import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from stuntcheck.schemas.common import ErrorResponse
from stuntcheck.schemas.prediction import InferenceStatusResponse
from stuntcheck.services.inference_client import inference_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Diagnostics"])

CHECK_PAGE = """<!DOCTYPE html>
<html>
  <head>
    <title>Prediction service connectivity</title>
    <style>
      body { font-family: sans-serif; padding: 20px; }
      button { padding: 10px 20px; font-size: 16px; margin-top: 10px; }
      pre { background: #f0f0f0; padding: 15px; border-radius: 5px; white-space: pre-wrap; }
    </style>
  </head>
  <body>
    <h1>Prediction service connectivity</h1>
    <button id="checkBtn">Check connection</button>
    <pre id="status">Press the button to contact the prediction service.</pre>
    <script>
      document.getElementById('checkBtn').addEventListener('click', async () => {
        const status = document.getElementById('status');
        status.textContent = 'Checking...';
        try {
          const res = await fetch('/api/checking-flask');
          const data = await res.json();
          if (data.status === 'success') {
            status.textContent = JSON.stringify(data.inference_response, null, 2);
          } else {
            status.textContent = 'Failed: ' + data.message;
          }
        } catch (err) {
          status.textContent = 'Error: ' + err.message;
        }
      });
    </script>
  </body>
</html>
"""


@router.get(
    "/api/checking-flask",
    response_model=InferenceStatusResponse,
    responses={500: {"description": "Prediction service unreachable", "model": ErrorResponse}},
    summary="Check the connection to the prediction service",
)
async def check_inference_connection() -> InferenceStatusResponse:
    # InferenceServiceError carries the transport error in details.error
    data = await inference_client.status()
    return InferenceStatusResponse(inference_response=data)


@router.get(
    "/api/check-flask",
    response_class=HTMLResponse,
    summary="Connectivity check page",
)
async def check_inference_page() -> HTMLResponse:
    return HTMLResponse(CHECK_PAGE)


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def list_routes(request: Request) -> HTMLResponse:
    # Included routers are nested in app.routes on newer FastAPI releases;
    # the OpenAPI document is flat on every release
    items = []
    for path, operations in request.app.openapi().get("paths", {}).items():
        for method in sorted(op.upper() for op in operations):
            items.append(
                f"<li><code>{method}</code> <code>{html.escape(path)}</code></li>"
            )
    body = (
        "<html><head><title>API Routes</title></head><body>"
        "<h1>API endpoints</h1><ul>" + "".join(items) + "</ul></body></html>"
    )
    return HTMLResponse(body)
