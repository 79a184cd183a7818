"""Export the two-point interpolation system to Singular.

The raw interpolation equations are not prime (the two points may
coincide). Singular's primary decomposition shows the two components; SymPy
alone cannot always decide this, which is what `SingularEngine` is for.

Run from the repository root:

    python examples/export_singular_script.py
"""

from algebraic_matroids import SingularIdeal, two_point_interpolation_system


def main() -> None:
    I, blocks = two_point_interpolation_system()
    D = blocks["D"]

    si = SingularIdeal.from_ideal(I)
    print(si.to_singular_script(
        eliminate=D,
        dimension=True,
        primality=True,
        comment="two-point interpolation: line and quadratic through A and B",
    ))

    # If you have Singular installed and on PATH, you can also run:
    # from algebraic_matroids import AlgebraicMatroid, SingularEngine
    # AlgebraicMatroid(I, engine=SingularEngine())  # raises NotPrimeError
    # out = si.run(timeout=120)
    # print(out)


if __name__ == "__main__":
    main()
