#!/usr/bin/env python
import os


pkg_info = {
    'name': 'hopblocks',
    'version': '1.0',
    'description': 'Per-family hopping blocks for tight-binding models',
    'long_description': 'HopBlocks accumulates hopping terms of tight-binding '
                        'models in per-family coordinate blocks and converts '
                        'them to compressed sparse row matrices.',
    'author': 'the HopBlocks development team',
    'license': 'BSD 3-clause',
    'platforms': 'Unix-like operating systems',
    'python_requires': '>=3.8',
    'install_requires': ['numpy', 'scipy'],
    'extras_require': {'test': ['pytest']},
}
packages = ['hopblocks', 'hopblocks.builder', 'hopblocks.cython']


# C Extensions
def c_setup():
    import configparser
    from setuptools import Extension, setup
    from Cython.Build import cythonize
    import numpy as np

    # Detect compiler from setup.cfg
    config = configparser.ConfigParser()
    config.read('setup.cfg')
    if 'config_cc' in config.sections():
        cc = config.get('config_cc', 'compiler')
    else:
        cc = 'unix'
    if cc == 'intelem':
        os.environ['CC'] = 'icc'
        os.environ['LDSHARED'] = 'icc -shared'

    # Define the extensions
    ext_names = ['blocks']
    c_extensions = [
        Extension(name=f"hopblocks.cython.{name}",
                  sources=[f"hopblocks/cython/{name}.pyx"],
                  include_dirs=[np.get_include()])
        for name in ext_names
    ]

    # Run setup
    setup(**pkg_info, packages=packages, ext_modules=cythonize(c_extensions))


if __name__ == "__main__":
    c_setup()
