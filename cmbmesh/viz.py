import numpy as np
from .ring_tables import UNSEEN, npix2nside
from .coords_ring import RingMapper
from .nested import ang2pix_nest
from .udgrade import mask_bad


def _moll_inverse(X, Y):
    # X in [-2*sqrt2, 2*sqrt2], Y in [-sqrt2, sqrt2]
    r2 = np.sqrt(2.0)
    th = np.arcsin(np.clip(Y / r2, -1.0, 1.0))      # auxiliary angle
    lat = np.arcsin(np.clip((2*th + np.sin(2*th)) / np.pi, -1.0, 1.0))
    lon = (np.pi * X) / (2.0 * r2 * np.cos(th).clip(1e-12))
    return lat, lon

def mollview_image(m, nest=False, xsize=800, ysize=None):
    """Nearest-pixel Mollweide raster of a map; NaN outside the ellipse and on bad pixels."""
    m = np.asarray(m, dtype=np.float64)
    nside = npix2nside(m.size)
    if ysize is None:
        ysize = xsize // 2
    r2 = np.sqrt(2.0)
    xs = np.linspace(-2*r2, 2*r2, xsize)
    ys = np.linspace(-r2, r2, ysize)
    X, Y = np.meshgrid(xs, ys)
    inside = (X*X)/8.0 + (Y*Y)/2.0 <= 1.0
    lat, lon = _moll_inverse(X, Y)
    theta = (np.pi/2) - lat
    # longitude grows to the left, as on the sky
    phi = np.mod(-lon, 2*np.pi)
    if nest:
        ip = ang2pix_nest(nside, theta.ravel(), phi.ravel())
    else:
        ip = RingMapper(nside).ang2pix(theta.ravel(), phi.ravel())
    vals = m[ip].reshape(ysize, xsize)
    return np.where(inside & ~mask_bad(vals, UNSEEN), vals, np.nan)

def mollview(m, nest=False, xsize=800, title=None, cmap='viridis', vmin=None, vmax=None,
             return_image=False, save=None):
    """Render a RING or NESTED map to a Mollweide image with matplotlib."""
    import matplotlib.pyplot as plt
    img = mollview_image(m, nest=nest, xsize=xsize)
    ysize, xsize = img.shape
    if vmin is None: vmin = np.nanpercentile(img, 0.5)
    if vmax is None: vmax = np.nanpercentile(img, 99.5)
    fig, ax = plt.subplots(figsize=(xsize/150, ysize/150), dpi=150)
    ax.imshow(img, origin='lower', cmap=cmap, vmin=vmin, vmax=vmax,
              extent=[-2*np.sqrt(2), 2*np.sqrt(2), -np.sqrt(2), np.sqrt(2)])
    ax.axis('off')
    if title: ax.set_title(title)
    if save:
        fig.savefig(save, bbox_inches='tight', pad_inches=0)
    plt.close(fig)
    if return_image:
        return img
    return None
