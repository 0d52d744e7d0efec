"""Renders mermaid diagrams to PNG with the mermaid CLI (mmdc)."""

import logging
import os
import subprocess
import tempfile
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import DiagramRenderError

logger = logging.getLogger(__name__)


@dataclass
class ChartData:
    """A diagram to render.

    Attributes:
        name: Upload file name of the rendered image
        data: Mermaid source text
    """
    name: str
    data: str


class MermaidRenderer:
    """Renders mermaid charts by running ``mmdc`` once per chart.

    Example:
        >>> renderer = MermaidRenderer(command="mmdc", timeout=60)
        >>> images = renderer.capture_mermaid_charts([ChartData("a.png", "graph TD; A-->B")])
    """

    def __init__(
        self,
        command: str = "mmdc",
        timeout: int = 60,
        scale: int = 2,
        theme: str = "default",
        background: str = "white",
    ):
        self.command = command
        self.timeout = timeout
        self.scale = scale
        self.theme = theme
        self.background = background

    @classmethod
    def from_config(cls, config) -> 'MermaidRenderer':
        """Build a renderer from a MermaidConfig."""
        return cls(
            command=config.command,
            timeout=config.timeout,
            scale=config.scale,
            theme=config.theme,
            background=config.background,
        )

    def capture_mermaid_charts(self, charts: List[ChartData]) -> List[Tuple[str, bytes]]:
        """Render every chart to PNG.

        Args:
            charts: Charts to render

        Returns:
            List of (name, png_bytes) in input order

        Raises:
            DiagramRenderError: If a chart cannot be rendered
        """
        if not charts:
            return []

        results: List[Tuple[str, bytes]] = []
        with tempfile.TemporaryDirectory(prefix="mermaid-") as work_dir:
            for index, chart in enumerate(charts):
                results.append((chart.name, self._render(chart, work_dir, index)))

        logger.debug(f"Rendered {len(results)} mermaid chart(s)")
        return results

    def _render(self, chart: ChartData, work_dir: str, index: int) -> bytes:
        input_path = os.path.join(work_dir, f"chart-{index}.mmd")
        output_path = os.path.join(work_dir, f"chart-{index}.png")

        with open(input_path, "w", encoding="utf-8") as f:
            f.write(chart.data)

        args = [
            self.command,
            "--input", input_path,
            "--output", output_path,
            "--outputFormat", "png",
            "--scale", str(self.scale),
            "--theme", self.theme,
            "--backgroundColor", self.background,
        ]

        logger.debug(f"Rendering mermaid chart {chart.name}")
        try:
            subprocess.run(
                args,
                text=True,
                capture_output=True,
                check=True,
                timeout=self.timeout
            )
        except FileNotFoundError:
            raise DiagramRenderError(
                chart.name,
                f"'{self.command}' not found. Install: npm install -g @mermaid-js/mermaid-cli"
            )
        except subprocess.CalledProcessError as e:
            raise DiagramRenderError(chart.name, (e.stderr or "").strip() or f"exit code {e.returncode}")
        except subprocess.TimeoutExpired:
            raise DiagramRenderError(chart.name, f"timed out (>{self.timeout}s)")

        image = self._read_output(output_path)
        if image is None:
            raise DiagramRenderError(chart.name, "no image was produced")
        return image

    def _read_output(self, output_path: str) -> Optional[bytes]:
        if not os.path.isfile(output_path):
            return None
        with open(output_path, "rb") as f:
            return f.read()
