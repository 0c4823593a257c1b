import math

import numpy as np
import torch

from ellsino import (
    FanBeamGeometry,
    MojetteGeometry,
    ParallelBeamGeometry,
    ellipse_sino,
    shepp_logan_ellipses,
)


def main():
    down = 4
    ell = np.array([[40, 70, 50, 150, 20, 10]], dtype=np.float64)

    geoms = {
        "par": ParallelBeamGeometry(nb=888 // down, na=984 // down, d=0.5 * down, offset=0.25),
        "fan arc": FanBeamGeometry(nb=888 // down, na=984 // down, d=1.0 * down,
                                   offset=0.75, dsd=949, dod=408),
        "fan flat": FanBeamGeometry(nb=888 // down, na=984 // down, d=1.0 * down,
                                    offset=0.75, dsd=949, dod=408, dfs=math.inf, source_offset=0.7),
        "moj": MojetteGeometry(nb=888 // down, na=984 // down, d=0.5 * down, offset=0.25),
    }

    for name, geom in geoms.items():
        sino = ellipse_sino(geom, ell, oversample=4, xscale=-1, yscale=-1)
        print(f"{name:9s} shape={sino.shape} max={sino.max():.2f} sum={sino.sum():.1f}")

    # Differentiable: gradient of a sinogram mismatch w.r.t. the ellipse parameters
    geom = ParallelBeamGeometry(nb=256, na=180)
    target = ellipse_sino(geom, shepp_logan_ellipses(fov=200, case="toft"))
    guess = torch.tensor(shepp_logan_ellipses(fov=210, case="toft"), requires_grad=True)
    loss = torch.mean((ellipse_sino(geom, guess) - torch.from_numpy(target)) ** 2)
    loss.backward()
    print("Loss:", loss.item())
    print("Gradient w.r.t. outer semi-axes:", guess.grad[0, 2:4].tolist())


if __name__ == "__main__":
    main()
