"""Escape-time evaluation of the quadratic Mandelbrot recurrence."""

from __future__ import annotations

from typing import Optional

import numpy as np
import tensorflow as tf

# Squared bailout radius.
HORIZON = 4.0


def evaluate(cx: float, cy: float, max_iterations: int) -> tuple[float, int]:
    """Iterate ``z -> z*z + c`` from the origin until it leaves radius 2.

    Returns the squared magnitude seen at the last check and the zero-based
    step at which escape was detected, or ``max_iterations`` when the orbit
    stayed bounded.
    """

    x = y = xx = yy = xy = 0.0
    for i in range(max_iterations):
        xx, yy, xy = x * x, y * y, x * y
        if xx + yy > HORIZON:
            return xx + yy, i
        x = xx - yy + cx
        y = 2 * xy + cy
    return xx + yy, max_iterations


@tf.function
def _escape_step(
    i: tf.Tensor,
    x: tf.Tensor,
    y: tf.Tensor,
    cx: tf.Tensor,
    cy: tf.Tensor,
    magnitude: tf.Tensor,
    iterations: tf.Tensor,
    active: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every orbit that has not escaped by one step."""

    xx = x * x
    yy = y * y
    xy = x * y
    current = xx + yy
    escaped = tf.logical_and(active, current > tf.cast(HORIZON, current.dtype))
    iterations = tf.where(escaped, tf.fill(tf.shape(iterations), i), iterations)
    magnitude = tf.where(active, current, magnitude)
    active = tf.logical_and(active, tf.logical_not(escaped))
    x = tf.where(active, xx - yy + cx, x)
    y = tf.where(active, 2 * xy + cy, y)
    return x, y, magnitude, iterations, active


@tf.function
def _escape_run(cx: tf.Tensor, cy: tf.Tensor, max_iterations: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor]:
    """Run the recurrence with a TensorFlow while loop until all points escape."""

    max_iterations = tf.cast(max_iterations, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    x = tf.zeros_like(cx)
    y = tf.zeros_like(cy)
    magnitude = tf.zeros_like(cx)
    iterations = tf.fill(tf.shape(cx), max_iterations)
    active = tf.ones_like(cx, tf.bool)

    def cond(i, x, y, magnitude, iterations, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, x, y, magnitude, iterations, active):
        x, y, magnitude, iterations, active = _escape_step(i, x, y, cx, cy, magnitude, iterations, active)
        return i + 1, x, y, magnitude, iterations, active

    _, _, _, magnitude, iterations, _ = tf.while_loop(cond, body, (i, x, y, magnitude, iterations, active))
    return magnitude, iterations


def evaluate_batch(
    cx: np.ndarray,
    cy: np.ndarray,
    max_iterations: int,
    *,
    device: Optional[str] = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Vectorized :func:`evaluate` over 1-D coordinate arrays."""

    cx = np.asarray(cx, dtype=np.float64).reshape(-1)
    cy = np.asarray(cy, dtype=np.float64).reshape(-1)
    if cx.shape != cy.shape:
        raise ValueError(f"coordinate arrays differ in shape: {cx.shape} vs {cy.shape}")

    with tf.device(device if device is not None else "/CPU:0"):
        cx_tf = tf.convert_to_tensor(cx, dtype=tf.float64)
        cy_tf = tf.convert_to_tensor(cy, dtype=tf.float64)
        magnitude, iterations = _escape_run(cx_tf, cy_tf, tf.constant(max_iterations, dtype=tf.int32))

    return magnitude.numpy(), iterations.numpy().astype(np.int64)
