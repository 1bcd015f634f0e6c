'''
This module provides the logger used across the package: console logging with
indentation levels and optional colours, optional file logging, and a timing
decorator for the evaluators.

@note If one wants to use file logging, the environment variable PYLOGFILE should be set to a non-zero value.
@note If one wants to disable colored output, the environment variable PYLOGCOLORS should be set to '0'.

-------------------------------------------------------
file        :   chebcond/common/flog.py
author      :   Maksymilian Kliczkowski
email       :   maksymilian.kliczkowski@pwr.edu.pl
description :   Console and file logging with verbosity control.
-------------------------------------------------------
'''

__all__         = [
    "Logger",
    "Colors",
    "get_global_logger"
]

import os
import re
import sys
import functools
import logging
import threading
from datetime import datetime
from typing import Optional

ENV_LOGGER_FILE     = 'PYLOGFILE'
ENV_LOGGER_COLORS   = 'PYLOGCOLORS'
ENV_LOGGER_INIT     = 'CHEBCOND_LOGGER_INIT_DONE'

######################################################
#! PRINT THE OUTPUT WITH A GIVEN COLOR
######################################################

class Colors:
    """
    ANSI colours for console output.
    """

    black   = "\033[30m"
    red     = "\033[31m"
    green   = "\033[32m"
    yellow  = "\033[33m"
    blue    = "\033[34m"
    white   = "\033[0m"  # Reset / default color

    def __init__(self, color : str):
        self.color = color

    def __str__(self) -> str:
        mapping = {
            "black" : Colors.black,
            "red"   : Colors.red,
            "green" : Colors.green,
            "yellow": Colors.yellow,
            "blue"  : Colors.blue,
        }
        return mapping.get(self.color, Colors.white)

    def __call__(self, text: str) -> str:
        return f"{self}{text}{Colors.white}"

# Regex for ANSI colour codes
_ansi_escape = re.compile(r'\x1b\[[0-9;]*m')

class StripAnsiFormatter(logging.Formatter):
    def format(self, record):
        msg = super().format(record)
        return _ansi_escape.sub('', msg)

######################################################
#! LOGGER
######################################################

class Logger:
    """
    Logger class for handling console and file logging with verbosity control.
    """

    LEVELS = {
        logging.DEBUG   : 'debug',
        logging.INFO    : 'info',
        logging.WARNING : 'warning',
        logging.ERROR   : 'error'
    }

    LEVELS_R = {v: k for k, v in LEVELS.items()}

    def __init__(self,
                name            : str           = "Global",
                logfile         : Optional[str] = None,
                lvl             : int           = logging.INFO,
                append_ts       : bool          = False,
                use_ts_in_cmd   : bool          = False):
        """
        Initialize the logger instance.

        Args:
            name (str):
                Name of the underlying `logging` logger.
            logfile (str):
                Name of the log file, used only if PYLOGFILE is set.
            lvl (int or str):
                Logging level (default: logging.INFO).
            append_ts (bool):
                Whether to append a timestamp to the log file name.
            use_ts_in_cmd (bool):
                Whether to print timestamps on the console.
        """
        self.now            = datetime.now()
        self.now_str        = self.now.strftime("%d_%m_%Y_%H-%M_%S")
        self.lvl            = Logger.LEVELS_R.get(lvl, logging.INFO) if isinstance(lvl, str) else lvl
        self.has_colors     = sys.stdout.isatty() and os.environ.get(ENV_LOGGER_COLORS, '1') != '0'

        self.logger             = logging.getLogger(name or __name__)
        self.logger.setLevel(self.lvl)
        self.logger.propagate   = False

        for h in list(self.logger.handlers):
            self.logger.removeHandler(h)
            h.close()

        console_fmt = '%(asctime)s [%(levelname)s] %(message)s' if use_ts_in_cmd else '[%(levelname)s] %(message)s'
        ch          = logging.StreamHandler(sys.stdout)
        ch.setLevel(self.lvl)
        ch.setFormatter(logging.Formatter(console_fmt, datefmt="%d_%m_%Y_%H-%M_%S"))
        self.logger.addHandler(ch)

        self.logfile = None
        if logfile is not None and os.environ.get(ENV_LOGGER_FILE, '0') != '0':
            base = logfile[:-len('.log')] if logfile.endswith('.log') else logfile
            base = base if len(base) > 0 else self.now_str
            if append_ts:
                base += f'_{self.now_str}'
            self.configure("./log", base)

    # --------------------------------------------------------------

    def colorize(self, txt: str, color: Optional[str]) -> str:
        if not color or not self.has_colors or color.lower() == 'white':
            return str(txt)
        return Colors(color)(txt)

    def configure(self, directory: str, base_name: str):
        """
        Add a file handler writing to `directory/base_name.log`.
        """
        os.makedirs(directory, exist_ok=True)
        self.logfile    = os.path.join(directory, f'{base_name}.log')
        fh              = logging.FileHandler(self.logfile, mode='w')
        fh.setLevel(self.lvl)
        fh.setFormatter(StripAnsiFormatter('%(asctime)s [%(levelname)s] %(message)s', datefmt="%d_%m_%Y_%H-%M_%S"))
        self.logger.addHandler(fh)

    # --------------------------------------------------------------

    @staticmethod
    def print_tab(lvl=0):
        '''Indentation prefix for a given level.'''
        return '\t' * lvl + ('->' if lvl > 0 else '')

    @staticmethod
    def print(msg: str, lvl=0):
        return f"{Logger.print_tab(lvl)}{msg}"

    def _log(self, log_level: int, msg: str, lvl: int, verbose: bool, color: Optional[str]):
        if not verbose:
            return
        getattr(self.logger, self.LEVELS.get(log_level, 'info'))(Logger.print(self.colorize(msg, color), lvl))

    def info(self, msg: str, lvl=0, verbose=True, color=None):
        self._log(logging.INFO, msg, lvl, verbose, color)

    def debug(self, msg: str, lvl=0, verbose=True, color=None):
        self._log(logging.DEBUG, msg, lvl, verbose, color)

    def warning(self, msg: str, lvl=0, verbose=True, color='yellow'):
        self._log(logging.WARNING, msg, lvl, verbose, color)

    def error(self, msg: str, lvl=0, verbose=True, color='red'):
        self._log(logging.ERROR, msg, lvl, verbose, color)

    # --------------------------------------------------------------

    def title(self, tail: str, desired_size: int = 50, fill: str = '=', lvl=0, verbose=True, color=None):
        """
        Log `tail` centred between filler characters.
        """
        if not verbose:
            return
        if len(tail) + 2 + lvl * 6 > desired_size:
            self.info(tail, lvl, verbose)
            return
        fill_size   = (desired_size - len(tail)) // (2 * len(fill))
        out         = (fill * fill_size) + tail + (fill * fill_size)
        out         = out.ljust(desired_size - 1, fill[0])[:desired_size]
        self.info(out, lvl, verbose, color)

    def timing(self, func):
        """
        Decorator logging the execution time of a function at debug level.

        Use as:
            @logger.timing
            def my_function(...):
                ...
        """
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            self.debug(f"Starting '{func.__name__}'...")
            start_time  = datetime.now()
            result      = func(*args, **kwargs)
            duration    = (datetime.now() - start_time).total_seconds()
            self.debug(f"Finished '{func.__name__}' in {duration:.4f} seconds.")
            return result
        return wrapper

######################################################
#! GLOBAL LOGGER
######################################################

_G_LOGGER       = None
_G_LOGGER_PID   = None
_G_LOCK         = threading.Lock()

def get_global_logger(**kwargs) -> Logger:
    """
    One Logger per process (PID), safe across threads/forks.

    Args:
        **kwargs: Arguments to pass to the Logger constructor
        (name, lvl, append_ts, use_ts_in_cmd, logfile).

    Returns:
        Logger: The global logger instance.

    Example
    -------
        >>> logger = get_global_logger()
        >>> logger.info("Windowed evaluation started.")
    """
    global  _G_LOGGER, _G_LOGGER_PID
    pid     = os.getpid()

    if _G_LOGGER is not None and _G_LOGGER_PID == pid:
        return _G_LOGGER

    with _G_LOCK:
        if _G_LOGGER is not None and _G_LOGGER_PID == pid:
            return _G_LOGGER

        logger = Logger(
            name            = kwargs.get("name",            "chebcond"),
            lvl             = kwargs.get("lvl",             logging.INFO),
            append_ts       = kwargs.get("append_ts",       True),
            use_ts_in_cmd   = kwargs.get("use_ts_in_cmd",   True),
            logfile         = kwargs.get("logfile",         None),
        )

        if os.environ.get(ENV_LOGGER_INIT, "0") != "1":
            os.environ[ENV_LOGGER_INIT] = "1"
            if os.environ.get("PY_BACKEND_INFO", "0") != "0":
                logger.title("Global Logger initialized!", 50, '#', 0)

        _G_LOGGER       = logger
        _G_LOGGER_PID   = pid
        return _G_LOGGER

######################################################
#! EOF
######################################################
