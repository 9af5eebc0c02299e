import pytest
from PIL import Image


@pytest.fixture
def bmp_file(tmp_path):
    """Returns a callable that writes a 24-bit BMP and returns its path.

    ``rows`` is a list of rows, top row first, each a list of (r, g, b).
    Pass ``size`` and ``fill`` instead for a single-color image.
    """
    def _make(name, rows=None, size=None, fill=(0, 0, 0)):
        if rows is not None:
            img = Image.new('RGB', (len(rows[0]), len(rows)))
            img.putdata([pixel for row in rows for pixel in row])
        else:
            img = Image.new('RGB', size, fill)
        path = tmp_path / name
        img.save(path, 'BMP')
        return str(path)

    return _make
