import argparse
import logging
from pathlib import Path
from typing import List, Optional

from molsimkit.analysis.secondary_structure import SS_CLASSES, dssp_run, save_ss_map, ss_map, ss_mean
from molsimkit.core.exceptions import TrajectoryError
from molsimkit.core.simulation import Simulation
from molsimkit.core.trajectory import Trajectory
from molsimkit.utils.config_manager import ConfigManager
from molsimkit.utils.helpers import ensure_directory

logger = logging.getLogger(__name__)

SS_METHODS = {'dssp': dssp_run}


def _add_range_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--first', type=int, help='First frame to analyze (1-based, overrides config).')
    parser.add_argument('--last', type=int, help='Last frame to analyze (overrides config).')
    parser.add_argument('--step', type=int, help='Stride between analyzed frames (overrides config).')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Molecular simulation trajectory analysis toolkit.')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging.')
    sub = parser.add_subparsers(dest='command', required=True)

    info = sub.add_parser('info', help='Show a summary of a trajectory.')
    info.add_argument('--trajectory', type=str, required=True, help='Path to MD trajectory file.')
    info.add_argument('--topology', type=str, help='Path to topology (PDB) file.')
    _add_range_args(info)

    ssm = sub.add_parser('ss-map', help='Compute the secondary structure map of a trajectory.')
    ssm.add_argument('--trajectory', type=str, help='Path to MD trajectory file (overrides config).')
    ssm.add_argument('--topology', type=str, help='Path to topology (PDB) file (overrides config).')
    ssm.add_argument('--config', type=str, help='Path to YAML configuration file.')
    ssm.add_argument('--selection', type=str, help='Atom selection (overrides config).')
    ssm.add_argument('--output-dir', type=str, help='Directory for results (overrides config).')
    ssm.add_argument('--no-progress', action='store_true', help='Disable the progress bar.')
    _add_range_args(ssm)
    return parser


def _apply_overrides(cfg: ConfigManager, args: argparse.Namespace) -> None:
    updates = {'trajectory': {}, 'secondary_structure': {}, 'output': {}}
    for key in ('first', 'last', 'step'):
        if getattr(args, key) is not None:
            updates['trajectory'][key] = getattr(args, key)
    if args.trajectory is not None: updates['trajectory']['file'] = args.trajectory
    if args.topology is not None: updates['trajectory']['topology'] = args.topology
    if getattr(args, 'selection', None) is not None: updates['secondary_structure']['selection'] = args.selection
    if getattr(args, 'output_dir', None) is not None: updates['output']['directory'] = args.output_dir
    if getattr(args, 'no_progress', False): updates['secondary_structure']['show_progress'] = False
    cfg.update_config(updates)


def run_info(cfg: ConfigManager) -> None:
    traj_cfg = cfg.get_trajectory_config()
    frame_range = cfg.get_frame_range()
    if traj_cfg['topology']:
        with Simulation(traj_cfg['topology'], traj_cfg['file'], frame_range.first, frame_range.last, frame_range.step) as simulation:
            logger.info(f"\n{simulation!r}")
            logger.info(f"Atoms: {len(simulation.atoms)}, residues: {simulation.atoms.n_residues}")
    else:
        with Trajectory(traj_cfg['file'], frame_range.first, frame_range.last, frame_range.step) as trajectory:
            logger.info(f"\n{trajectory!r}")
            logger.info(f"Atoms per frame: {trajectory.current_frame().n_atoms}")


def run_ss_map(cfg: ConfigManager) -> None:
    # Imported here so `info` does not pull in matplotlib
    from molsimkit.visualization.ss_plotter import plot_ss_map

    traj_cfg, ss_cfg = cfg.get_trajectory_config(), cfg.get_secondary_structure_config()
    if not traj_cfg['topology']:
        raise ValueError("A topology file is required for secondary structure maps.")
    frame_range = cfg.get_frame_range()
    out_dir = ensure_directory(cfg.get_output_config()['directory'])

    with Simulation(traj_cfg['topology'], traj_cfg['file'], frame_range.first, frame_range.last, frame_range.step) as simulation:
        logger.info(f"Computing secondary structure map for '{ss_cfg['selection']}' over {len(simulation)} frames.")
        ssmap = ss_map(simulation, selection=ss_cfg['selection'], ss_method=SS_METHODS[ss_cfg['method']],
                       show_progress=ss_cfg['show_progress'])

    save_ss_map(ssmap, out_dir / 'ss_map.npy')
    plot_ss_map(ssmap, output_path=out_dir / 'ss_map.png')
    for code, (number, name) in SS_CLASSES.items():
        content = ss_mean(ssmap, number)
        if content > 0:
            logger.info(f"Mean {name} ({code!r}) content: {content:.4f}")
    cfg.save_config(out_dir / 'config_used.yaml')


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        cfg = ConfigManager(getattr(args, 'config', None))
        _apply_overrides(cfg, args)
        if not cfg.get_trajectory_config()['file']:
            raise ValueError("No trajectory file given (use --trajectory or the config file).")
        if args.command == 'info':
            run_info(cfg)
        else:
            run_ss_map(cfg)
        logger.info("molsimkit processing completed.")

    except FileNotFoundError as e: logger.error(f"File Error: {e}"); raise SystemExit(1)
    except TrajectoryError as e: logger.error(f"Trajectory Error: {e}"); raise SystemExit(1)
    except ValueError as e: logger.error(f"Value Error: {e}"); raise SystemExit(1)
    except Exception as e: logger.error(f"Unexpected error: {e}", exc_info=True); raise SystemExit(1)

if __name__ == "__main__":
    main()
