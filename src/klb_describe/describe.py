"""Operations: one network call each, rendered into a RenderOptions sink.

Rendering operations return False when the request itself failed (the error line
has already been written), True otherwise, including for non-200 answers
which are reported in the output. `export_typescript` returns None instead.
"""

import functools
import logging

from klb_describe.client import ApiClient, TransportError
from klb_describe.config import DEFAULT_DOC_FILE
from klb_describe.generator.description import format_description, format_root_objects, load_description
from klb_describe.generator.naming import strip_parameters
from klb_describe.generator.response import (
    format_resource,
    render_response,
    write_banner,
    write_raw,
    write_status_error,
    write_text,
)
from klb_describe.generator.style import RenderOptions, format_markdown
from klb_describe.generator.typescript import emit_typescript, typescript_lines

logger = logging.getLogger(__name__)


def _class_path(api_path: str) -> str:
    path = strip_parameters(api_path)
    if path != api_path:
        logger.debug("Describing %s as %s", api_path, path)
    return path


def describe_api(
    client: ApiClient,
    api_path: str,
    options: RenderOptions,
    raw: bool = False,
    typescript: bool = False,
) -> bool:
    """Describe an endpoint: formatted, raw JSON, or as TypeScript."""
    write_banner("Describing API endpoint", api_path, "Host", client.settings.api_host, options)

    path = _class_path(api_path)
    try:
        response = client.options(path)
    except TransportError as e:
        options.emit(options.error(str(e)))
        return False

    if raw:
        renderer = write_raw
    elif typescript:
        renderer = emit_typescript
    else:
        renderer = format_description
    render_response(response, "API information", options, renderer)
    return True


def get_api_resource(
    client: ApiClient,
    api_path: str,
    options: RenderOptions,
    raw: bool = False,
    max_depth: int | None = None,
) -> bool:
    write_banner("GET request to API endpoint", api_path, "Host", client.settings.api_host, options)

    try:
        response = client.get(api_path)
    except TransportError as e:
        options.emit(options.error(str(e)))
        return False

    if raw:
        renderer = write_raw
    else:
        depth = max_depth if max_depth is not None else client.settings.max_depth
        renderer = functools.partial(format_resource, max_depth=depth)
    render_response(response, "API resource", options, renderer)
    return True


def export_typescript(client: ApiClient, api_path: str, options: RenderOptions) -> list[str] | None:
    """Return the bare TypeScript declarations of an endpoint.

    Nothing but declarations is returned, so the lines can be saved as a
    `.ts` file. Any failure (transport, status, body or description) is
    written to `options` and yields None.
    """
    try:
        response = client.options(_class_path(api_path))
    except TransportError as e:
        options.emit(options.error(str(e)))
        return None

    if not response.ok:
        write_status_error(response.status_code, "API information", options)
        return None
    if response.body is None:
        write_text(response.text, options)
        return None

    doc = load_description(response.body, options)
    if doc is None:
        return None
    return typescript_lines(doc)


def fetch_documentation(client: ApiClient, options: RenderOptions, file_name: str = DEFAULT_DOC_FILE) -> bool:
    """Fetch a documentation file; markdown mode returns it untouched."""
    file_name = file_name or DEFAULT_DOC_FILE
    write_banner("Fetching documentation", file_name, "Source", client.doc_url(file_name), options)

    try:
        response = client.fetch_doc(file_name)
    except TransportError as e:
        options.emit(options.error(str(e)))
        return False

    if not response.ok:
        write_status_error(response.status_code, "documentation", options)
        return True

    if options.markdown:
        options.emit("## Documentation")
        options.emit("")
        options.emit(response.text)
    else:
        options.emit(options.heading("Documentation"))
        options.emit("")
        options.emit(format_markdown(response.text, options))
    return True


def describe_root_objects(client: ApiClient, options: RenderOptions) -> bool:
    """List the objects exposed at the root of the API."""
    write_banner("Listing API objects", client.settings.api_prefix, "Host", client.settings.api_host, options)

    try:
        response = client.options("")
    except TransportError as e:
        options.emit(options.error(str(e)))
        return False

    render_response(response, "root API information", options, format_root_objects)
    return True
