"""Programmatic construction of frames."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from ..errors import BuilderError
from .frame import AtomDatum, ConFrame, FrameHeader


@dataclass
class BuilderAtom:
    """An atom accumulated by a builder, not yet grouped by type."""

    symbol: str
    x: float
    y: float
    z: float
    is_fixed: bool
    atom_id: int
    mass: float
    vx: float | None = None
    vy: float | None = None
    vz: float | None = None

    @property
    def has_velocity(self) -> bool:
        return self.vx is not None


class ConFrameBuilder:
    """
    Accumulates atoms and derives the frame header on :meth:`build`.

    Atoms are grouped by symbol in first-occurrence order: the first atom
    with a new symbol opens a type, later atoms with that symbol join it
    wherever they appear, and the type mass is the one given with the
    first occurrence. A builder is single-use; it cannot be touched after
    :meth:`build`.

    Example:
        builder = ConFrameBuilder([10.0, 10.0, 10.0], [90.0, 90.0, 90.0])
        builder.add_atom("Cu", 0.0, 0.0, 0.0, True, 0, 63.546)
        builder.add_atom("H", 1.0, 1.0, 1.0, False, 1, 1.008)
        frame = builder.build()
    """

    def __init__(
        self,
        cell: Sequence[float],
        angles: Sequence[float],
        prebox_header: Sequence[str] = ("", ""),
        postbox_header: Sequence[str] = ("", ""),
    ) -> None:
        """
        Initialize frame builder.

        Args:
            cell: Box lengths (Lx, Ly, Lz).
            angles: Box angles (alpha, beta, gamma).
            prebox_header: The two free-text lines before the box lengths.
            postbox_header: The two free-text lines after the box angles.
        """
        self._cell = _triple(cell, "cell")
        self._angles = _triple(angles, "angles")
        self._prebox = _header_pair(prebox_header, "prebox_header")
        self._postbox = _header_pair(postbox_header, "postbox_header")
        self._atoms: list[BuilderAtom] = []
        self._built = False

    def __len__(self) -> int:
        return len(self._atoms)

    def _check_open(self) -> None:
        if self._built:
            raise BuilderError("ConFrameBuilder has already been built")

    def prebox_header(self, lines: Sequence[str]) -> ConFrameBuilder:
        """Set the two prebox header lines. Returns the builder."""
        self._check_open()
        self._prebox = _header_pair(lines, "prebox_header")
        return self

    def postbox_header(self, lines: Sequence[str]) -> ConFrameBuilder:
        """Set the two postbox header lines. Returns the builder."""
        self._check_open()
        self._postbox = _header_pair(lines, "postbox_header")
        return self

    def add_atom(
        self,
        symbol: str,
        x: float,
        y: float,
        z: float,
        is_fixed: bool,
        atom_id: int,
        mass: float,
    ) -> ConFrameBuilder:
        """
        Add an atom without velocity.

        Args:
            symbol: Chemical symbol.
            x, y, z: Cartesian position.
            is_fixed: Whether the atom is held fixed.
            atom_id: Non-negative atom identifier.
            mass: Mass of the atom's type.

        Returns:
            The builder, for chaining.

        Raises:
            ValueError: If atom_id is negative.
        """
        self._check_open()
        self._atoms.append(
            BuilderAtom(
                symbol=str(symbol),
                x=float(x),
                y=float(y),
                z=float(z),
                is_fixed=bool(is_fixed),
                atom_id=_atom_id(atom_id),
                mass=float(mass),
            )
        )
        return self

    def add_atom_with_velocity(
        self,
        symbol: str,
        x: float,
        y: float,
        z: float,
        is_fixed: bool,
        atom_id: int,
        mass: float,
        vx: float,
        vy: float,
        vz: float,
    ) -> ConFrameBuilder:
        """Add an atom carrying a velocity. Returns the builder."""
        self._check_open()
        self._atoms.append(
            BuilderAtom(
                symbol=str(symbol),
                x=float(x),
                y=float(y),
                z=float(z),
                is_fixed=bool(is_fixed),
                atom_id=_atom_id(atom_id),
                mass=float(mass),
                vx=float(vx),
                vy=float(vy),
                vz=float(vz),
            )
        )
        return self

    def build(self) -> ConFrame:
        """
        Finalize the frame.

        Returns:
            New ConFrame with atoms reordered so each type is contiguous.

        Raises:
            BuilderError: If the builder was already built.
            ValueError: If some atoms carry velocities and others do not.
        """
        self._check_open()
        self._built = True

        with_velocity = sum(1 for atom in self._atoms if atom.has_velocity)
        if 0 < with_velocity < len(self._atoms):
            raise ValueError(
                f"{with_velocity} of {len(self._atoms)} atoms carry velocities; "
                "either all atoms or none must have velocities"
            )

        # symbol -> (shared symbol string, mass of first occurrence, members)
        groups: dict[str, tuple[str, float, list[BuilderAtom]]] = {}
        for atom in self._atoms:
            if atom.symbol not in groups:
                groups[atom.symbol] = (atom.symbol, atom.mass, [])
            groups[atom.symbol][2].append(atom)

        atom_data: list[AtomDatum] = []
        for symbol, _, members in groups.values():
            for atom in members:
                atom_data.append(
                    AtomDatum(
                        symbol=symbol,
                        x=atom.x,
                        y=atom.y,
                        z=atom.z,
                        is_fixed=atom.is_fixed,
                        atom_id=atom.atom_id,
                        vx=atom.vx,
                        vy=atom.vy,
                        vz=atom.vz,
                    )
                )

        header = FrameHeader(
            prebox_header=self._prebox,
            boxl=self._cell,
            angles=self._angles,
            postbox_header=self._postbox,
            natm_types=len(groups),
            natms_per_type=[len(members) for _, _, members in groups.values()],
            masses_per_type=[mass for _, mass, _ in groups.values()],
        )
        self._atoms = []
        return ConFrame(header=header, atom_data=atom_data)


def _triple(values: Sequence[float], name: str) -> tuple[float, float, float]:
    values = tuple(float(v) for v in values)
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    return values


def _atom_id(value: int) -> int:
    value = int(value)
    if value < 0:
        raise ValueError(f"atom_id must be non-negative, got {value}")
    return value


def _header_pair(lines: Sequence[str], name: str) -> tuple[str, str]:
    lines = tuple(str(line) for line in lines)
    if len(lines) != 2:
        raise ValueError(f"{name} must have 2 lines, got {len(lines)}")
    return lines
