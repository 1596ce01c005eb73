import os

BASE = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

def load_lib_file(relative_path):
    """ reads a file relative to the gpunoise package directory """
    with open(os.path.join(BASE, relative_path), 'r') as content_file:
        content = content_file.read()

    return content
