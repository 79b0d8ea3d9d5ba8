"""
Setup script for Running History.
Run: pip install -e .           (development install)
     python setup.py py2app     (macOS build)
"""

import sys

from setuptools import setup

APP = ['app.py']
DATA_FILES = []
OPTIONS = {
    'argv_emulation': True,
    'packages': ['nicegui', 'plotly', 'pandas', 'numpy'],
    'strip': True,
    'compressed': True,
}

py2app_kwargs = {}
if 'py2app' in sys.argv:
    py2app_kwargs = dict(
        app=APP,
        data_files=DATA_FILES,
        options={'py2app': OPTIONS},
        setup_requires=['py2app'],
    )

setup(
    name='running-history',
    version='1.0.0',
    description='Run metric trends, consistency scores, and coaching insights',
    python_requires='>=3.8',
    py_modules=['app', 'db', 'history_cli', 'metric_types', 'trends'],
    packages=['core', 'components'],
    install_requires=[
        'nicegui',
        'numpy',
        'pandas',
        'plotly',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'running-history=app:main',
            'running-history-report=history_cli:main',
        ],
    },
    **py2app_kwargs,
)
