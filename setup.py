import glob
import os
from os import path
import platform

from setuptools import find_packages
from setuptools import setup

try:
    from Cython.Build import build_ext as _cy_build_ext
    from Cython.Distutils.extension import Extension as _cy_Extension

    HAS_CYTHON = True
except ImportError:
    _cy_build_ext = _cy_Extension = None
    HAS_CYTHON = False

DISABLE_EXTENSION = bool(os.environ.get('KESTREL_DISABLE_CYTHON'))
IS_CPYTHON = platform.python_implementation() == 'CPython'

MYDIR = path.abspath(os.path.dirname(__file__))


def load_version():
    filename = path.join(MYDIR, 'kestrel', 'version.py')
    globals_ = {}
    with open(filename) as version_file:
        exec(version_file.read(), globals_)
    return globals_['__version__']


if HAS_CYTHON and IS_CPYTHON and not DISABLE_EXTENSION:
    assert _cy_Extension is not None
    assert _cy_build_ext is not None

    def list_modules(dirname, pattern):
        filenames = glob.glob(path.join(dirname, pattern))

        module_names = []
        for name in filenames:
            module, ext = path.splitext(path.basename(name))
            if module != '__init__':
                module_names.append((module, ext))

        return module_names

    package_names = [
        'kestrel.routing',
        'kestrel.util',
    ]

    modules_to_exclude = [
        # NOTE: These modules rely on runtime introspection of type
        #   annotations (NamedTuple, Protocol, typing.get_type_hints), which
        #   is not preserved faithfully by Cython.
        'kestrel.routing.inference',
        'kestrel.routing.params',
        'kestrel.routing.router',
        'kestrel.routing.template',
        'kestrel.util.misc',
    ]

    cython_directives = {'language_level': '3', 'annotation_typing': False}

    ext_modules = [
        _cy_Extension(
            package + '.' + module,
            sources=[path.join(*(package.split('.') + [module + ext]))],
            cython_directives=cython_directives,
            optional=True,
        )
        for package in package_names
        for module, ext in list_modules(path.join(MYDIR, *package.split('.')), '*.py')
        if (package + '.' + module) not in modules_to_exclude
    ]

    cmdclass = {'build_ext': _cy_build_ext}
else:
    ext_modules = []
    cmdclass = {}


setup(
    name='kestrel',
    version=load_version(),
    description=(
        'URI template routing engine: path matching, parameter binding '
        'and reverse routing.'
    ),
    license='Apache-2.0',
    python_requires='>=3.8',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[],
    extras_require={
        'test': ['pytest'],
        'cython': ['cython'],
    },
    classifiers=[
        'Development Status :: 5 - Production/Stable',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python :: 3',
        'Topic :: Internet :: WWW/HTTP :: WSGI',
    ],
    cmdclass=cmdclass,
    ext_modules=ext_modules,
)
