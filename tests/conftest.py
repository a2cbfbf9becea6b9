import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import brand_export
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from brand_export.core.models import ContainerSize  # noqa: E402
from brand_export.export.config import PageSpec  # noqa: E402
from brand_export.guidelines import GuidelineConfig, GuidelineStore  # noqa: E402


# Common test fixtures
@pytest.fixture
def page_spec():
    """A4 portrait: content 170mm wide, 247mm usable per section page."""
    return PageSpec()


@pytest.fixture
def container():
    """The 400x400 logo editing canvas."""
    return ContainerSize(400, 400)


@pytest.fixture
def grid4_config():
    """Grid 4, edge threshold 3, drag threshold 3px."""
    return GuidelineConfig(grid_size=4, snap_threshold=3, drag_threshold=3)


@pytest.fixture
def store():
    return GuidelineStore()


@pytest.fixture
def image_factory():
    """Factory to create solid-color RGB images."""
    def _create(width: int, height: int, color="white"):
        return Image.new("RGB", (width, height), color=color)
    return _create


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image file."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def png_bytes():
    """Encoded 32x16 PNG."""
    import io
    buf = io.BytesIO()
    Image.new("RGBA", (32, 16), color=(200, 30, 30, 255)).save(buf, format="PNG")
    return buf.getvalue()
