# mazerunner

`mazerunner` reads a PNG image of a maze, finds a path through it and writes
the result as a new PNG with the path drawn in red.

The PNG decoder is pure Python. It checks the signature and every chunk's CRC,
validates the IHDR and PLTE chunks, inflates the joined IDAT data and reverses
the scanline filters (None, Sub, Up, Average, Paeth). It decodes greyscale
(1, 2, 4, 8 and 16 bits), truecolor, greyscale with alpha, truecolor with
alpha and palette images. Errors are raised as `PngError`, a subclass of
`ValueError`.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Command line

```
mazerunner maze.png
mazerunner maze.png -o solved.png
```

The input argument is optional and defaults to `mazediag10001x10001.png`;
`-o`/`--output` defaults to `output.png`.

A pixel counts as open floor when it decodes to a colour pixel (truecolor,
truecolor with alpha, or greyscale with alpha) whose blue sample is non-zero;
every other pixel is wall. Sixteen-bit images are reduced to eight bits first.
The path starts at column 0, row 1 and ends at the last column,
second-to-last row, moving up, down, left and right. It is found with A*,
drawn in red over the decoded picture, laid on an opaque black background and
saved as PNG.

The command exits with status 0 on success and 1, with a message on standard
error, when the file cannot be read or written, the PNG is invalid, or there
is no path.

## Library use

Decode a PNG:

```python
from mazerunner.pngdecode import decode_png

with open("maze.png", "rb") as fh:
    png = decode_png(fh.read())

print(png.width, png.height, png.color_type, png.bit_depth)
first_pixel = png.pixels[0][0]   # PalettePixel, GreyscalePixel or TruecolorPixel
entries = png.palette            # list of TruecolorPixel, empty unless PLTE was present
```

Work with chunks directly:

```python
from mazerunner.pngchunks import read_signature, iter_chunks, decode_ihdr

body = data[read_signature(data):]
for chunk in iter_chunks(body):
    print(chunk.type, len(chunk.data))
    if chunk.type == "IHDR":
        header = decode_ihdr(chunk.data)
        print(header.width, header.height, header.scanline_size)
```

Lower-level steps are available in `mazerunner.pngdecode`:
`unfilter_scanline`, `paeth_predictor`, `decode_scanline` and
`decode_pixels`.

Solve a grid of booleans, where `True` means open floor:

```python
from mazerunner.pathfinding import astar, dijkstra

maze = [
    [False, False, False],
    [True,  True,  True],
    [False, False, False],
]
route = astar(maze, 0, 1, 2, 1)
print([(p.x, p.y) for p in route])   # [(0, 1), (1, 1), (2, 1)]
```

`dijkstra` takes the same arguments and leaves out the straight-line distance
estimate. Both return the path with its two ends included, and raise
`ValueError` when the start lies outside the maze or the end cannot be
reached.

Render and solve a decoded image with Pillow:

```python
from mazerunner.cli import render, solve_and_draw

image = render(png)           # the decoded picture as an RGBA Pillow image
solved = solve_and_draw(png)  # the picture with the A* path in red
solved.save("solved.png")
```

## Limitations

- Interlaced (Adam7) images are not de-interlaced; the interlace method is
  read from the header but the pixel data is decoded as if it were not
  interlaced.
- Ancillary chunks (such as `tRNS`, `gAMA` or `sRGB`) are skipped, so palette
  entries are always fully opaque.
- The command only writes an output file; it does not display the image.