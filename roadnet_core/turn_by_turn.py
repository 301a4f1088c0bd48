"""
Turn-by-turn navigation directions for routes.

This module generates human-readable driving instructions from PathResult
objects and exports them as CSV, JSON or plain text.
"""

import csv
import json
from dataclasses import dataclass
from typing import List, Optional

from .exceptions import ValidationError
from .geo import calculate_bearing, compass_direction
from .types import Edge, Node, PathResult


def format_distance_km(distance_km: float) -> str:
    """Whole kilometres print without decimals, others with one."""
    if float(distance_km).is_integer():
        return f"{int(distance_km)}"
    return f"{distance_km:.1f}"


def generate_instruction(from_node: Node, to_node: Node, edge: Edge) -> str:
    """
    Instruction text for one traversed edge.

    Example:
        "Continue on Expressway from Mumbai to Panvel Junction (42 km)"
    """
    return (
        f"Continue on {edge.road_class.title} from {from_node.label} to {to_node.label} "
        f"({format_distance_km(edge.distance_km)} km)"
    )


@dataclass
class TurnInstruction:
    """A single turn-by-turn instruction."""
    step_number: int
    instruction: str
    heading: str
    distance_km: float
    time_minutes: float
    cost: float
    cumulative_distance_km: float
    cumulative_time_minutes: float
    road_class: str


class TurnByTurnGenerator:
    """
    Generate turn-by-turn navigation instructions from a route.
    """

    def __init__(self, route: PathResult):
        """
        Args:
            route: A found route

        Raises:
            ValidationError: If the route is the unreachable sentinel
        """
        if not route.found:
            raise ValidationError(
                f"Cannot generate directions for unreachable route {route.start_id} -> {route.end_id}"
            )
        self.route = route

    def generate_instructions(self) -> List[TurnInstruction]:
        instructions = []
        cumulative_distance = 0.0
        cumulative_time = 0.0

        for i, segment in enumerate(self.route.segments):
            cumulative_distance += segment.distance_km
            cumulative_time += segment.effective_time_minutes
            bearing = calculate_bearing(segment.from_node.position, segment.to_node.position)

            instructions.append(TurnInstruction(
                step_number=i + 1,
                instruction=segment.instruction,
                heading=compass_direction(bearing),
                distance_km=segment.distance_km,
                time_minutes=segment.effective_time_minutes,
                cost=segment.cost,
                cumulative_distance_km=cumulative_distance,
                cumulative_time_minutes=cumulative_time,
                road_class=segment.road_class.value,
            ))

        return instructions

    def export_to_csv(self, output_path: str) -> None:
        instructions = self.generate_instructions()

        with open(output_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow([
                'Step',
                'Instruction',
                'Heading',
                'Road Class',
                'Distance (km)',
                'Time (min)',
                'Cost',
                'Cumulative (km)',
                'Cumulative (min)'
            ])
            for inst in instructions:
                writer.writerow([
                    inst.step_number,
                    inst.instruction,
                    inst.heading,
                    inst.road_class,
                    f"{inst.distance_km:.3f}",
                    f"{inst.time_minutes:.1f}",
                    f"{inst.cost:.2f}",
                    f"{inst.cumulative_distance_km:.3f}",
                    f"{inst.cumulative_time_minutes:.1f}"
                ])

    def export_to_json(self, output_path: str) -> None:
        instructions = self.generate_instructions()

        instructions_data = []
        for inst in instructions:
            instructions_data.append({
                'step': inst.step_number,
                'instruction': inst.instruction,
                'heading': inst.heading,
                'road_class': inst.road_class,
                'distance_km': round(inst.distance_km, 3),
                'time_minutes': round(inst.time_minutes, 1),
                'cost': round(inst.cost, 2),
                'cumulative_km': round(inst.cumulative_distance_km, 3),
                'cumulative_minutes': round(inst.cumulative_time_minutes, 1)
            })

        output = {
            'summary': self.route.summary(),
            'coordinates': [list(coord) for coord in self.route.coordinate_sequence],
            'instructions': instructions_data
        }

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(output, f, indent=2)

    def export_to_text(self, output_path: str) -> None:
        instructions = self.generate_instructions()
        summary = self.route.summary()

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write("=" * 80 + "\n")
            f.write(f"ROUTE {self.route.start_id.upper()} -> {self.route.end_id.upper()} "
                    f"({self.route.mode.value}-optimal)\n")
            f.write("=" * 80 + "\n\n")

            f.write(f"Total Distance: {self.route.total_distance_km:.2f} km\n")
            f.write(f"Total Time: {summary['time_display']}\n")
            f.write(f"Total Cost: {self.route.total_cost:.2f}\n\n")

            for inst in instructions:
                f.write(f"{inst.step_number}. {inst.instruction}\n")
                f.write(f"   Heading {inst.heading}, {inst.time_minutes:.0f} min ")
                f.write(f"(Total: {inst.cumulative_distance_km:.2f} km)\n")
                f.write("\n")


def generate_turn_by_turn(route: PathResult, output_csv: Optional[str] = None,
                          output_json: Optional[str] = None, output_text: Optional[str] = None) -> List[TurnInstruction]:
    """
    Convenience function to generate turn-by-turn directions.

    Args:
        route: A found route
        output_csv: Optional path to CSV output
        output_json: Optional path to JSON output
        output_text: Optional path to text output

    Returns:
        List of TurnInstruction objects
    """
    generator = TurnByTurnGenerator(route)

    if output_csv:
        generator.export_to_csv(output_csv)

    if output_json:
        generator.export_to_json(output_json)

    if output_text:
        generator.export_to_text(output_text)

    return generator.generate_instructions()
