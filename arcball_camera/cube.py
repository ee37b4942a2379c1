import ctypes

import numpy as np
from OpenGL.GL import *


# Single triangle strip covering all six faces: position, color
STRIP = (
    ((1.0, 1.0, -1.0), (1.0, 0.0, 0.0)),
    ((-1.0, 1.0, -1.0), (1.0, 0.0, 0.0)),
    ((1.0, 1.0, 1.0), (1.0, 0.0, 0.0)),
    ((-1.0, 1.0, 1.0), (0.0, 1.0, 0.0)),
    ((-1.0, -1.0, 1.0), (0.0, 1.0, 0.0)),
    ((-1.0, 1.0, -1.0), (0.0, 1.0, 0.0)),
    ((-1.0, -1.0, -1.0), (0.0, 0.0, 1.0)),
    ((1.0, 1.0, -1.0), (0.0, 0.0, 1.0)),
    ((1.0, -1.0, -1.0), (0.0, 0.0, 1.0)),
    ((1.0, 1.0, 1.0), (1.0, 1.0, 0.0)),
    ((1.0, -1.0, 1.0), (1.0, 1.0, 0.0)),
    ((-1.0, -1.0, 1.0), (1.0, 1.0, 0.0)),
    ((1.0, -1.0, -1.0), (1.0, 0.0, 1.0)),
    ((-1.0, -1.0, -1.0), (1.0, 0.0, 1.0)),
)


class Cube:
    def __init__(self, size=2.0):
        self.size = size
        self.vao = None
        self.vbo = None
        self.vertex_count = len(STRIP)

    def vertex_data(self):
        s = self.size / 2.0
        return np.array([
            (px * s, py * s, pz * s, r, g, b)
            for (px, py, pz), (r, g, b) in STRIP
        ], dtype=np.float32).ravel()

    def create_vao(self):
        if self.vao:
            self.delete()

        vertices = self.vertex_data()

        vao = glGenVertexArrays(1)
        glBindVertexArray(vao)

        vbo = glGenBuffers(1)
        glBindBuffer(GL_ARRAY_BUFFER, vbo)
        glBufferData(GL_ARRAY_BUFFER, vertices.nbytes, vertices, GL_STATIC_DRAW)

        stride = 6 * 4
        glVertexAttribPointer(0, 3, GL_FLOAT, GL_FALSE, stride, ctypes.c_void_p(0))
        glEnableVertexAttribArray(0)

        glVertexAttribPointer(1, 3, GL_FLOAT, GL_FALSE, stride, ctypes.c_void_p(3 * 4))
        glEnableVertexAttribArray(1)

        glBindVertexArray(0)

        self.vao = vao
        self.vbo = vbo

    def delete(self):
        if self.vbo:
            glDeleteBuffers(1, [self.vbo])
        if self.vao:
            glDeleteVertexArrays(1, [self.vao])
        self.vao = None
        self.vbo = None

    def draw(self):
        glBindVertexArray(self.vao)
        glDrawArrays(GL_TRIANGLE_STRIP, 0, self.vertex_count)
        glBindVertexArray(0)

    def get_model_matrix(self):
        return np.identity(4, dtype=np.float32)
