"""Rendering of a whole HTTP exchange around the document renderers.

A non-200 status short-circuits to an error block; a body that is not JSON
is shown verbatim; otherwise the decoded JSON goes to the chosen renderer.
"""

import json
from typing import Any, Callable

from klb_describe.client import ApiResponse
from klb_describe.config import DEFAULT_MAX_DEPTH
from .pretty import render_value
from .style import RenderOptions

Renderer = Callable[[Any, RenderOptions], None]


def write_banner(title: str, target: str, source_label: str, source: str, options: RenderOptions) -> None:
    if options.markdown:
        options.emit(f"## {title}: `{target}`")
        options.emit(f"**{source_label}:** {source}")
    else:
        options.emit(f"{options.style(title + ':', fg='blue', bold=True)} {options.style(target, fg='green')}")
        options.emit(options.muted(f"{source_label}: {source}"))
    options.emit("")


def write_status_error(status_code: int, what: str, options: RenderOptions) -> None:
    options.emit(options.field("Status", options.style(str(status_code), fg="red")))
    options.emit(options.error(f"Unable to fetch {what}"))


def write_raw(payload: Any, options: RenderOptions) -> None:
    options.emit(options.heading("Raw Response"))
    options.fence_open("json")
    options.emit(json.dumps(payload, indent=2, ensure_ascii=False))
    options.fence_close()


def write_text(text: str, options: RenderOptions) -> None:
    options.emit(options.heading("Response (Text)"))
    options.fence_open()
    options.emit(text)
    options.fence_close()


def format_resource(payload: Any, options: RenderOptions, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    """Pretty-print the result of a GET request."""
    data = payload
    if isinstance(payload, dict):
        if payload.get("result") == "error":
            options.emit(options.error(str(payload.get("error") or "API returned an error")))
        data = payload.get("data", payload)

    options.emit(options.heading("Response"))
    options.fence_open()
    render_value(data, options, max_depth=max_depth)
    options.fence_close()


def render_response(response: ApiResponse, what: str, options: RenderOptions, renderer: Renderer) -> None:
    if not response.ok:
        write_status_error(response.status_code, what, options)
        return
    if response.body is None:
        write_text(response.text, options)
        return
    renderer(response.body, options)
