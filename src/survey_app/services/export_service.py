"""Export service: hands composed BA Survey documents to the platform.

Rendering to a file and presenting a share dialog are the only steps of the
flow that can suspend or fail. Both sit behind small collaborator classes so
the composer can be tested without any platform facility.
"""
import asyncio
import logging
import os
import re
import webbrowser
from pathlib import Path

from shared.document import compose, survey_title


class RenderFailure(Exception):
    """Raised by a renderer or sharer when no document could be produced."""
    pass


class DocumentRenderer:
    """Turns a document body into a file and returns its path."""

    async def render(self, body, name):
        raise NotImplementedError


class DocumentSharer:
    """Presents a rendered file through the platform share/save flow."""

    async def is_available(self):
        return False

    async def share(self, path, mime_type, title):
        raise NotImplementedError


_UNSAFE_FILENAME_CHARS = re.compile(r'[^A-Za-z0-9._-]+')


def safe_filename(name, extension='.html'):
    """Build a file name from a survey title."""
    stem = _UNSAFE_FILENAME_CHARS.sub('_', name).strip('_') or 'ba_survey'
    return f"{stem[:120]}{extension}"


class HtmlFileRenderer(DocumentRenderer):
    """Writes the document body as a standalone HTML file in export_dir."""

    def __init__(self, export_dir):
        self.export_dir = export_dir
        self.logger = logging.getLogger(self.__class__.__name__)

    def _write(self, body, name):
        os.makedirs(self.export_dir, exist_ok=True)
        path = os.path.join(self.export_dir, safe_filename(name))
        with open(path, 'w', encoding='utf-8') as f:
            f.write(body)
        return path

    async def render(self, body, name):
        try:
            path = await asyncio.to_thread(self._write, body, name)
        except OSError as e:
            raise RenderFailure(f"Could not write document to {self.export_dir}: {e}") from e
        self.logger.info(f"Rendered document to {path}")
        return path


class BrowserSharer(DocumentSharer):
    """Opens the rendered file with the desktop's default viewer."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    async def is_available(self):
        try:
            await asyncio.to_thread(webbrowser.get)
        except webbrowser.Error:
            return False
        return True

    async def share(self, path, mime_type, title):
        url = Path(path).resolve().as_uri()
        self.logger.info(f"Opening '{title}' ({mime_type}): {url}")
        if not await asyncio.to_thread(webbrowser.open, url):
            raise RenderFailure(f"No viewer could open {url}")


class ExportService:
    """Composes, renders and shares BA Survey documents."""

    def __init__(self, renderer, sharer=None, config=None):
        self.renderer = renderer
        self.sharer = sharer
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    def _options(self, options):
        if options is not None:
            return options
        if self.config is not None:
            return self.config.render_options()
        return None

    async def export(self, record, options=None):
        """Export a validated record.

        Returns:
            str or None: path of the produced file, or None when the renderer
                or sharer failed. Failures are logged, never raised, and not
                retried.
        """
        title = survey_title(record)
        body = compose(record, self._options(options))

        try:
            path = await self.renderer.render(body, title)
        except (RenderFailure, OSError) as e:
            self.logger.error(f"BA document generation failed for '{title}': {e}")
            return None

        if self.sharer is not None:
            mime_type = self.config.share_mime_type if self.config else 'text/html'
            dialog_title = self.config.share_dialog_title if self.config else title
            try:
                if await self.sharer.is_available():
                    await self.sharer.share(path, mime_type, dialog_title)
                else:
                    self.logger.info("Sharing not available, document saved only")
            except (RenderFailure, OSError) as e:
                self.logger.error(f"Sharing BA document '{title}' failed: {e}")
                return None

        return path
